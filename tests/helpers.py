"""Shared test helpers for buffer construction.

Usage:
    from tests.helpers import SAMPLE_RATE, make_buffer, make_segments, make_sine
"""

from __future__ import annotations

import numpy as np

from voicelift._types import SampleBuffer

SAMPLE_RATE = 44100


def make_sine(
    frequency: float = 440.0,
    sample_rate: int = SAMPLE_RATE,
    duration: float = 0.1,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Create a float32 sine wave with specified amplitude."""
    t = np.arange(int(sample_rate * duration), dtype=np.float64) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def make_segments(
    segments: list[tuple[float, float]],
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Concatenate constant-amplitude segments given as (seconds, amplitude)."""
    parts = [
        np.full(round(seconds * sample_rate), amplitude, dtype=np.float32)
        for seconds, amplitude in segments
    ]
    return np.concatenate(parts)


def make_buffer(*channels: np.ndarray, sample_rate: int = SAMPLE_RATE) -> SampleBuffer:
    """Build a SampleBuffer from one array per channel."""
    return SampleBuffer(np.stack(channels), sample_rate)


def make_noise(
    n_samples: int,
    amplitude: float = 0.05,
    seed: int = 0,
) -> np.ndarray:
    """Uniform noise in [-amplitude, amplitude] (float32, reproducible)."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-amplitude, amplitude, n_samples).astype(np.float32)
