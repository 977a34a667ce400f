"""Audio decoding into SampleBuffers.

Converts file bytes into the multi-channel float32 buffers the
enhancement pipeline consumes. Channels are preserved.
"""

from __future__ import annotations

import io
import wave

import numpy as np
import soundfile as sf

from voicelift._audio_constants import PCM_INT16_MAX, PCM_UINT8_SCALE
from voicelift._types import SampleBuffer
from voicelift.exceptions import AudioFormatError, AudioTooLargeError
from voicelift.logging import get_logger

logger = get_logger("audio_io")

# Inverse of the export quantization scale
_PCM16_DECODE_SCALE = float(PCM_INT16_MAX)


def decode_audio(audio_bytes: bytes, max_bytes: int | None = None) -> SampleBuffer:
    """Decode audio bytes to a SampleBuffer.

    Supports WAV, FLAC, OGG, and other formats via libsndfile.

    Args:
        audio_bytes: Audio file bytes.
        max_bytes: Size limit. None reads it from ``VOICELIFT_MAX_FILE_SIZE_MB``.

    Returns:
        SampleBuffer with one row per source channel.

    Raises:
        AudioFormatError: If the format is unsupported or bytes are invalid.
        AudioTooLargeError: If the input exceeds the size limit.
    """
    if not audio_bytes:
        raise AudioFormatError("Empty audio (0 bytes)")

    if max_bytes is None:
        from voicelift.config.settings import get_settings

        max_bytes = get_settings().io.max_file_size_bytes
    if len(audio_bytes) > max_bytes:
        raise AudioTooLargeError(len(audio_bytes), max_bytes)

    try:
        # always_2d keeps mono files as (frames, 1)
        data, sample_rate = sf.read(io.BytesIO(audio_bytes), dtype="float32", always_2d=True)
    except Exception:
        # Fallback to wave stdlib (plain WAV PCM without complex headers)
        try:
            data, sample_rate = _decode_wav_stdlib(audio_bytes)
        except AudioFormatError:
            raise
        except Exception as wav_err:
            raise AudioFormatError(f"Could not decode audio: {wav_err}") from wav_err

    if data.shape[0] == 0:
        raise AudioFormatError("Audio has no frames")

    buffer = SampleBuffer(data.T, int(sample_rate))

    logger.debug(
        "audio_decoded",
        frames=buffer.frame_count,
        channels=buffer.channel_count,
        sample_rate=buffer.sample_rate,
        duration_s=round(buffer.duration, 3),
    )

    return buffer


def decode_wav(wav_bytes: bytes) -> SampleBuffer:
    """Decode a canonical PCM WAV (as written by ``encode_wav``) into a SampleBuffer.

    Uses the same 32767 scale as the encoder, so a round trip is exact to
    within one quantization step.

    Raises:
        AudioFormatError: If the bytes are not a PCM WAV file.
    """
    if not wav_bytes:
        raise AudioFormatError("Empty audio (0 bytes)")
    data, sample_rate = _decode_wav_stdlib(wav_bytes)
    return SampleBuffer(data.T, sample_rate)


def _decode_wav_stdlib(audio_bytes: bytes) -> tuple[np.ndarray, int]:
    """Decode WAV PCM using wave stdlib as fallback.

    Returns:
        Tuple (float32 array of shape (frames, channels), sample rate).

    Raises:
        AudioFormatError: If the WAV is invalid or uses an unsupported width.
    """
    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wf:
            n_channels = wf.getnchannels()
            sampwidth = wf.getsampwidth()
            sample_rate = wf.getframerate()
            n_frames = wf.getnframes()

            if n_frames == 0:
                raise AudioFormatError("WAV file has no audio frames")

            raw_data = wf.readframes(n_frames)
    except wave.Error as err:
        raise AudioFormatError(f"Invalid WAV file: {err}") from err

    if sampwidth == 2:
        data = np.frombuffer(raw_data, dtype="<i2").astype(np.float32) / _PCM16_DECODE_SCALE
    elif sampwidth == 1:
        data = np.frombuffer(raw_data, dtype=np.uint8).astype(np.float32) / PCM_UINT8_SCALE - 1.0
    else:
        raise AudioFormatError(f"Sample width {sampwidth} bytes not supported (expected 1 or 2)")

    return data.reshape(-1, n_channels), sample_rate
