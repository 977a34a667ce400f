"""Shared fixtures for all tests."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

# Ensure repo root is on sys.path so tests can import the `voicelift` package
# when running pytest from the repository root without an editable install.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from voicelift._types import SampleBuffer  # noqa: E402
from voicelift.config.settings import get_settings  # noqa: E402
from voicelift.export.wav import write_wav  # noqa: E402

from tests.helpers import SAMPLE_RATE, make_sine  # noqa: E402

_ENV_VARS = (
    "VOICELIFT_NOISE_REDUCTION",
    "VOICELIFT_VOICE_ENHANCEMENT",
    "VOICELIFT_SILENCE_REMOVAL",
    "VOICELIFT_SILENCE_THRESHOLD",
    "VOICELIFT_VOLUME_NORMALIZATION",
    "VOICELIFT_TARGET_VOLUME",
    "VOICELIFT_HIGHPASS_REFERENCE_RATE",
    "VOICELIFT_MAX_FILE_SIZE_MB",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Each test sees default settings unless it sets env vars itself."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mono_sine() -> SampleBuffer:
    """1 second 440Hz mono sine at 44.1kHz, amplitude 0.5."""
    return SampleBuffer(make_sine(amplitude=0.5, duration=1.0), SAMPLE_RATE)


@pytest.fixture
def stereo_sine() -> SampleBuffer:
    """1 second stereo buffer: 440Hz at 0.5 left, 880Hz at 0.3 right."""
    left = make_sine(frequency=440.0, amplitude=0.5, duration=1.0)
    right = make_sine(frequency=880.0, amplitude=0.3, duration=1.0)
    return SampleBuffer(np.stack([left, right]), SAMPLE_RATE)


@pytest.fixture
def wav_file(tmp_path: Path, stereo_sine: SampleBuffer) -> Path:
    """Stereo WAV file on disk."""
    return write_wav(stereo_sine, tmp_path / "interview.wav")
