"""Canonical 16-bit PCM WAV encoding.

Produces the 44-byte RIFF/WAVE header followed by interleaved,
frame-major little-endian int16 samples.
"""

from __future__ import annotations

import io
import wave
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

import numpy as np

from voicelift._audio_constants import BYTES_PER_SAMPLE_INT16, PCM_INT16_SCALE
from voicelift.logging import get_logger

if TYPE_CHECKING:
    from voicelift._types import SampleBuffer

logger = get_logger("export.wav")

ENHANCED_PREFIX = "enhanced_"


def quantize_pcm16(channels: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1] and round to int16, shape preserved."""
    clamped = np.clip(channels.astype(np.float64), -1.0, 1.0)
    return np.rint(clamped * PCM_INT16_SCALE).astype("<i2")


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Encode a SampleBuffer to WAV PCM 16-bit bytes.

    Args:
        buffer: Buffer to export. Samples outside [-1, 1] are clipped.

    Returns:
        Complete WAV file bytes (with header).
    """
    # (channels, frames) -> (frames, channels) gives frame-major interleaving
    pcm_data = quantize_pcm16(buffer.channels).T

    out = io.BytesIO()
    with wave.open(out, "wb") as wf:
        wf.setnchannels(buffer.channel_count)
        wf.setsampwidth(BYTES_PER_SAMPLE_INT16)
        wf.setframerate(buffer.sample_rate)
        wf.writeframes(np.ascontiguousarray(pcm_data).tobytes())

    return out.getvalue()


def enhanced_filename(name: str) -> str:
    """Export file name for an enhanced version of ``name``.

    ``"interview.mp3"`` becomes ``"enhanced_interview.wav"``.
    """
    return f"{ENHANCED_PREFIX}{PurePath(name).stem}.wav"


def write_wav(buffer: SampleBuffer, path: str | Path) -> Path:
    """Encode ``buffer`` and write it to ``path``.

    Returns:
        The written path.
    """
    target = Path(path)
    data = encode_wav(buffer)
    target.write_bytes(data)
    logger.info(
        "wav_written",
        path=str(target),
        bytes=len(data),
        channels=buffer.channel_count,
        duration_s=round(buffer.duration, 3),
    )
    return target
