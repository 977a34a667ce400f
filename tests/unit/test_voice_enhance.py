"""Tests for VoiceEnhanceStage and its filter primitives."""

from __future__ import annotations

import math

import numpy as np
import pytest

from voicelift._audio_constants import LEGACY_HIGHPASS_SAMPLE_RATE
from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.voice_enhance import (
    VoiceEnhanceStage,
    apply_emphasis,
    apply_highpass,
    apply_soft_compression,
    highpass_alpha,
)

from tests.helpers import SAMPLE_RATE, make_buffer, make_noise, make_sine


def reference_highpass(audio: np.ndarray, alpha: float) -> np.ndarray:
    """Sample-by-sample one-pole high-pass, blended 80/20."""
    out = np.empty_like(audio)
    prev_in = 0.0
    prev_out = 0.0
    for i, x in enumerate(audio):
        y = alpha * (prev_out + x - prev_in)
        out[i] = x * 0.8 + y * 0.2
        prev_in = x
        prev_out = y
    return out


def reference_emphasis(audio: np.ndarray, intensity: float) -> np.ndarray:
    out = np.empty_like(audio)
    prev = 0.0
    for i, x in enumerate(audio):
        emphasized = x + (x - prev) * intensity * 0.3
        out[i] = x * (1 - intensity * 0.2) + emphasized * (intensity * 0.2)
        prev = x
    return out


class TestHighpassAlpha:
    def test_alpha_formula(self) -> None:
        rc = 1.0 / (2 * math.pi * 80.0)
        dt = 1.0 / 44100
        assert highpass_alpha(80.0, 44100) == pytest.approx(rc / (rc + dt))

    def test_alpha_grows_with_sample_rate(self) -> None:
        assert highpass_alpha(80.0, 8000) < highpass_alpha(80.0, 48000) < 1.0


class TestFilterPrimitives:
    def test_highpass_matches_recurrence(self) -> None:
        audio = make_noise(500, amplitude=0.5).astype(np.float64)
        alpha = highpass_alpha(80.0, 16000)

        np.testing.assert_allclose(
            apply_highpass(audio, alpha), reference_highpass(audio, alpha), atol=1e-12
        )

    def test_highpass_attenuates_dc(self) -> None:
        """A constant input decays toward 80% of its level (filtered part -> 0)."""
        audio = np.full(SAMPLE_RATE, 0.5)
        alpha = highpass_alpha(80.0, SAMPLE_RATE)
        result = apply_highpass(audio, alpha)

        assert result[0] == pytest.approx(0.4 + 0.1 * alpha)
        assert result[-1] == pytest.approx(0.4, abs=1e-4)

    def test_emphasis_matches_recurrence(self) -> None:
        audio = make_noise(300, amplitude=0.5, seed=3).astype(np.float64)

        np.testing.assert_allclose(
            apply_emphasis(audio, 0.6), reference_emphasis(audio, 0.6), atol=1e-12
        )

    def test_compression_known_value(self) -> None:
        """0.9 at intensity 1: level 0.8, gain 0.8/0.9 -> 0.9 * (0.7 + 0.3 * 0.8/0.9)."""
        audio = np.array([0.9, -0.9, 0.5, 0.7])

        result = apply_soft_compression(audio, 1.0)

        assert result[0] == pytest.approx(0.87)
        assert result[1] == pytest.approx(-0.87)
        assert result[2] == 0.5
        assert result[3] == 0.7  # at threshold: untouched

    def test_compression_reduces_peaks_only(self) -> None:
        audio = np.linspace(-1.0, 1.0, 201)

        result = apply_soft_compression(audio, 0.5)

        over = np.abs(audio) > 0.7
        well_over = np.abs(audio) > 0.75
        assert np.all(np.abs(result[over]) <= np.abs(audio[over]))
        assert np.all(np.abs(result[well_over]) < np.abs(audio[well_over]))
        np.testing.assert_array_equal(result[~over], audio[~over])

    def test_compression_does_not_mutate_input(self) -> None:
        audio = np.array([0.95, 0.1])
        apply_soft_compression(audio, 1.0)
        assert audio[0] == 0.95


class TestVoiceEnhanceStage:
    def test_zero_intensity_returns_input(self, mono_sine: SampleBuffer) -> None:
        stage = VoiceEnhanceStage(intensity=0.0)
        assert stage.process(mono_sine) is mono_sine

    def test_matches_reference_chain(self) -> None:
        """Stage output equals high-pass -> emphasis -> compression, in order."""
        # Arrange
        audio = make_sine(amplitude=0.9, duration=0.05) + make_noise(2205, amplitude=0.05)
        buffer = SampleBuffer(audio, SAMPLE_RATE)
        intensity = 0.7

        # Act
        result = VoiceEnhanceStage(intensity).process(buffer)

        # Assert
        x = buffer.channel(0).astype(np.float64)
        x = reference_highpass(x, highpass_alpha(80.0, SAMPLE_RATE))
        x = reference_emphasis(x, intensity)
        x = apply_soft_compression(x, intensity)
        np.testing.assert_allclose(result.channel(0), x.astype(np.float32), atol=1e-6)

    def test_same_length_new_buffer(self, stereo_sine: SampleBuffer) -> None:
        result = VoiceEnhanceStage(0.3).process(stereo_sine)

        assert result is not stereo_sine
        assert result.frame_count == stereo_sine.frame_count
        assert result.channel_count == 2
        assert result.sample_rate == stereo_sine.sample_rate

    def test_silent_channel_stays_silent(self) -> None:
        """Channels are processed independently; zeros stay zeros."""
        buffer = make_buffer(make_sine(amplitude=0.5), np.zeros(4410, dtype=np.float32))

        result = VoiceEnhanceStage(1.0).process(buffer)

        np.testing.assert_array_equal(result.channel(1), np.zeros(4410, dtype=np.float32))
        assert np.any(result.channel(0) != buffer.channel(0))

    def test_uses_buffer_sample_rate_by_default(self) -> None:
        buffer = SampleBuffer(make_sine(sample_rate=8000, duration=0.1), 8000)

        default = VoiceEnhanceStage(0.5).process(buffer)
        explicit = VoiceEnhanceStage(0.5, reference_sample_rate=8000).process(buffer)

        assert VoiceEnhanceStage(0.5).filter_sample_rate(buffer) == 8000
        np.testing.assert_array_equal(default.channels, explicit.channels)

    def test_legacy_reference_rate_changes_filter(self) -> None:
        """Pinning the filter to 44100 differs from using the true 8 kHz rate."""
        buffer = SampleBuffer(make_noise(800, amplitude=0.3), 8000)

        default = VoiceEnhanceStage(0.5).process(buffer)
        legacy = VoiceEnhanceStage(
            0.5, reference_sample_rate=LEGACY_HIGHPASS_SAMPLE_RATE
        ).process(buffer)

        assert not np.allclose(default.channels, legacy.channels)

    @pytest.mark.parametrize("intensity", [-0.5, 1.01])
    def test_rejects_out_of_range_intensity(self, intensity: float) -> None:
        with pytest.raises(ValueError, match="intensity"):
            VoiceEnhanceStage(intensity)

    def test_stage_identity(self) -> None:
        stage = VoiceEnhanceStage(0.3)

        assert stage.name == "voice_enhance"
        assert stage.state is PipelineState.VOICE_ENHANCE
        assert stage.progress_label == "Enhancing voice clarity..."
