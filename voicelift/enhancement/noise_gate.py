"""NoiseGateStage — soft per-sample gate against an estimated noise floor.

The noise floor is the 20th-percentile absolute amplitude of each channel.
Samples below a threshold derived from it are attenuated in proportion to
how far below the threshold they sit, so quiet passages fade instead of
being hard-muted.
"""

from __future__ import annotations

import math

import numpy as np

from voicelift._audio_constants import (
    NOISE_FLOOR_PERCENTILE,
    NOISE_GATE_MAX_REDUCTION,
    NOISE_GATE_THRESHOLD_SPAN,
    PROGRESS_NOISE,
)
from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.stages import EnhancementStage


def estimate_noise_floor(magnitudes: np.ndarray) -> float:
    """Return the low-percentile magnitude used as the gate reference.

    Args:
        magnitudes: 1-D array of absolute sample values.
    """
    index = math.floor(NOISE_FLOOR_PERCENTILE * len(magnitudes))
    return float(np.partition(magnitudes, index)[index])


class NoiseGateStage(EnhancementStage):
    """Attenuate samples below a noise-floor-relative threshold.

    Args:
        intensity: Gate aggressiveness in [0, 1]. 0 makes the stage a no-op.
    """

    def __init__(self, intensity: float) -> None:
        if not 0.0 <= intensity <= 1.0:
            msg = f"intensity must be in [0, 1], got {intensity}"
            raise ValueError(msg)
        self._intensity = intensity

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "noise_gate"

    @property
    def state(self) -> PipelineState:
        return PipelineState.NOISE_GATE

    @property
    def progress_label(self) -> str:
        return PROGRESS_NOISE

    @property
    def intensity(self) -> float:
        return self._intensity

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Gate every channel independently.

        Returns:
            The input itself when intensity is 0, otherwise a new buffer of
            the same length where ``|out| <= |in|`` sample by sample.
        """
        if self._intensity == 0:
            return buffer

        reduction = 1.0 - NOISE_GATE_MAX_REDUCTION * self._intensity
        output = buffer.channels.astype(np.float64)

        for channel in output:
            magnitudes = np.abs(channel)
            threshold = estimate_noise_floor(magnitudes) * (
                1.0 + NOISE_GATE_THRESHOLD_SPAN * self._intensity
            )
            below = magnitudes < threshold
            channel[below] *= np.sqrt(magnitudes[below] / threshold) * reduction

        return buffer.with_channels(output)
