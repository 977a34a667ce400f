"""VoiceEnhanceStage — gentle high-pass, presence emphasis, soft compression.

Three passes per channel, in order:
    1. One-pole RC high-pass at 80 Hz, mixed 80/20 with the dry signal.
    2. First-difference emphasis, mixed in proportion to intensity.
    3. Soft compressor above 0.7 with ratio ``1 + intensity``, blended
       70/30 with the uncompressed sample.
"""

from __future__ import annotations

import math

import numpy as np
from scipy.signal import lfilter

from voicelift._audio_constants import (
    COMPRESSOR_THRESHOLD,
    COMPRESSOR_WET_MIX,
    EMPHASIS_AMOUNT,
    EMPHASIS_MIX,
    HIGHPASS_CUTOFF_HZ,
    HIGHPASS_WET_MIX,
    PROGRESS_VOICE,
)
from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.stages import EnhancementStage


def highpass_alpha(cutoff_hz: float, sample_rate: int) -> float:
    """Smoothing coefficient of a one-pole RC high-pass filter."""
    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    dt = 1.0 / sample_rate
    return rc / (rc + dt)


def apply_highpass(audio: np.ndarray, alpha: float) -> np.ndarray:
    """Blend ``audio`` with its one-pole high-passed version.

    Implements ``y[n] = alpha * (y[n-1] + x[n] - x[n-1])`` from rest
    (``y[-1] = x[-1] = 0``) as the IIR ``b = [a, -a]``, ``a = [1, -a]``.
    """
    filtered = lfilter([alpha, -alpha], [1.0, -alpha], audio)
    return audio * (1.0 - HIGHPASS_WET_MIX) + filtered * HIGHPASS_WET_MIX


def apply_emphasis(audio: np.ndarray, intensity: float) -> np.ndarray:
    """Boost high frequencies with a first-difference term."""
    previous = np.concatenate(([0.0], audio[:-1]))
    emphasized = audio + (audio - previous) * intensity * EMPHASIS_AMOUNT
    mix = EMPHASIS_MIX * intensity
    return audio * (1.0 - mix) + emphasized * mix


def apply_soft_compression(audio: np.ndarray, intensity: float) -> np.ndarray:
    """Reduce the excess above the threshold, keeping part of the dynamics."""
    ratio = 1.0 + intensity
    output = audio.copy()
    magnitudes = np.abs(audio)
    over = magnitudes > COMPRESSOR_THRESHOLD
    if not np.any(over):
        return output

    level = COMPRESSOR_THRESHOLD + (magnitudes[over] - COMPRESSOR_THRESHOLD) / ratio
    gain = level / magnitudes[over]
    output[over] = audio[over] * ((1.0 - COMPRESSOR_WET_MIX) + gain * COMPRESSOR_WET_MIX)
    return output


class VoiceEnhanceStage(EnhancementStage):
    """Voice clarity stage.

    Args:
        intensity: Emphasis and compression strength in [0, 1]. 0 is a no-op.
        cutoff_hz: High-pass cutoff frequency in Hz (default: 80).
        reference_sample_rate: Fixed rate used to derive the filter
            coefficient. None (default) uses each buffer's own rate; 44100
            reproduces the legacy tuning regardless of the buffer's rate.
    """

    def __init__(
        self,
        intensity: float,
        cutoff_hz: float = HIGHPASS_CUTOFF_HZ,
        reference_sample_rate: int | None = None,
    ) -> None:
        if not 0.0 <= intensity <= 1.0:
            msg = f"intensity must be in [0, 1], got {intensity}"
            raise ValueError(msg)
        self._intensity = intensity
        self._cutoff_hz = cutoff_hz
        self._reference_sample_rate = reference_sample_rate

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "voice_enhance"

    @property
    def state(self) -> PipelineState:
        return PipelineState.VOICE_ENHANCE

    @property
    def progress_label(self) -> str:
        return PROGRESS_VOICE

    @property
    def intensity(self) -> float:
        return self._intensity

    def filter_sample_rate(self, buffer: SampleBuffer) -> int:
        """Sample rate the high-pass coefficient is computed against."""
        if self._reference_sample_rate is not None:
            return self._reference_sample_rate
        return buffer.sample_rate

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Run high-pass, emphasis and compression on every channel.

        Returns:
            The input itself when intensity is 0, otherwise a new buffer
            of the same length.
        """
        if self._intensity == 0:
            return buffer

        alpha = highpass_alpha(self._cutoff_hz, self.filter_sample_rate(buffer))
        output = np.empty(buffer.channels.shape, dtype=np.float64)

        for index in range(buffer.channel_count):
            audio = buffer.channel(index).astype(np.float64)
            audio = apply_highpass(audio, alpha)
            audio = apply_emphasis(audio, self._intensity)
            output[index] = apply_soft_compression(audio, self._intensity)

        return buffer.with_channels(output)
