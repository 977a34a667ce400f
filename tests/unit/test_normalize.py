"""Tests for NormalizeStage.

Validates the headroom-adjusted target, the 0.8-1.2 deadband,
silence handling, and cross-channel peak detection.
"""

from __future__ import annotations

import numpy as np
import pytest

from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.normalize import NormalizeStage, normalization_factor

from tests.helpers import SAMPLE_RATE, make_buffer, make_sine


def buffer_with_peak(peak: float, n_samples: int = 4410) -> SampleBuffer:
    audio = make_sine(amplitude=peak * 0.5, duration=n_samples / SAMPLE_RATE)
    audio[n_samples // 2] = peak
    return SampleBuffer(audio, SAMPLE_RATE)


class TestNormalizationFactor:
    def test_factor_includes_headroom(self) -> None:
        assert normalization_factor(0.4, 0.8) == pytest.approx(1.9)

    def test_silence_gets_unity(self) -> None:
        assert normalization_factor(0.0, 0.8) == 1.0


class TestNormalizeStage:
    def test_boost_to_safe_target(self) -> None:
        """Peak 0.4, target 0.8 -> factor 1.9, new peak 0.76."""
        # Arrange
        buffer = buffer_with_peak(0.4)
        stage = NormalizeStage(target_peak=0.8)

        # Act
        result = stage.process(buffer)

        # Assert
        assert result.peak() == pytest.approx(0.76, abs=1e-6)
        factor = 0.76 / buffer.peak()
        np.testing.assert_allclose(result.channels, buffer.channels * factor, rtol=1e-6)

    def test_attenuate_hot_signal(self) -> None:
        """Peak 1.0, target 0.5 -> factor 0.475 (outside deadband)."""
        buffer = buffer_with_peak(1.0)

        result = NormalizeStage(target_peak=0.5).process(buffer)

        assert result.peak() == pytest.approx(0.475, abs=1e-6)

    def test_deadband_returns_unscaled_copy(self) -> None:
        """Peak 0.7, target 0.8 -> factor ~1.086, inside (0.8, 1.2)."""
        buffer = buffer_with_peak(0.7)

        result = NormalizeStage(target_peak=0.8).process(buffer)

        assert result is not buffer
        assert not np.shares_memory(result.channels, buffer.channels)
        np.testing.assert_array_equal(result.channels, buffer.channels)

    @pytest.mark.parametrize(
        ("peak", "target"),
        [(0.4, 0.8), (0.9, 0.5), (0.1, 1.0), (0.63, 0.8), (0.5, 0.6), (0.95, 0.8)],
    )
    def test_peak_property(self, peak: float, target: float) -> None:
        """Scaled to 0.95 * target when |0.95t/p - 1| >= 0.2, otherwise unchanged."""
        buffer = buffer_with_peak(peak)
        actual_peak = buffer.peak()

        result = NormalizeStage(target_peak=target).process(buffer)

        factor = 0.95 * target / actual_peak
        if abs(factor - 1) >= 0.2 + 1e-9:
            assert result.peak() == pytest.approx(0.95 * target, abs=1e-6)
        elif abs(factor - 1) < 0.2 - 1e-9:
            np.testing.assert_array_equal(result.channels, buffer.channels)

    def test_silent_buffer_unchanged(self) -> None:
        buffer = SampleBuffer(np.zeros((2, 100), dtype=np.float32), SAMPLE_RATE)

        result = NormalizeStage(target_peak=0.8).process(buffer)

        np.testing.assert_array_equal(result.channels, 0.0)
        assert result.frame_count == 100

    def test_peak_taken_across_channels(self) -> None:
        """The loudest channel sets the factor; all channels scale together."""
        quiet = make_sine(amplitude=0.1)
        loud = make_sine(amplitude=0.2)
        loud[100] = 0.4
        buffer = make_buffer(quiet, loud)

        result = NormalizeStage(target_peak=0.8).process(buffer)

        factor = 0.76 / buffer.peak()
        np.testing.assert_allclose(result.channel(0), quiet * factor, rtol=1e-6)
        assert np.max(np.abs(result.channel(1))) == pytest.approx(0.76, abs=1e-6)

    def test_large_boost(self) -> None:
        """Quiet material is boosted by the full factor (9.5 here)."""
        audio = np.array([0.1, 0.05, -0.1], dtype=np.float32)
        buffer = SampleBuffer(audio, SAMPLE_RATE)

        result = NormalizeStage(target_peak=1.0).process(buffer)

        assert result.peak() == pytest.approx(0.95, abs=1e-6)

    @pytest.mark.parametrize("target", [0.0, -0.5, 1.5])
    def test_rejects_invalid_target(self, target: float) -> None:
        with pytest.raises(ValueError, match="target_peak"):
            NormalizeStage(target_peak=target)

    def test_stage_identity(self) -> None:
        stage = NormalizeStage(0.8)

        assert stage.name == "normalize"
        assert stage.state is PipelineState.NORMALIZE
        assert stage.progress_label == "Normalizing audio levels..."
        assert stage.target_peak == 0.8
