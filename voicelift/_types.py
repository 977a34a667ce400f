"""Core types for voicelift.

This module defines the sample buffer every enhancement stage reads and
writes, plus the pipeline state enum. Changes here affect the entire system.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from voicelift.exceptions import InvalidBufferError

if TYPE_CHECKING:
    from collections.abc import Sequence


class PipelineState(Enum):
    """State of an enhancement run.

    Linear transitions (disabled stages are skipped):
        IDLE -> NOISE_GATE -> VOICE_ENHANCE -> SILENCE_TRIM -> NORMALIZE -> DONE
        Any stage -> FAILED (stage raised; original buffer is returned)
    """

    IDLE = "idle"
    NOISE_GATE = "noise_gate"
    VOICE_ENHANCE = "voice_enhance"
    SILENCE_TRIM = "silence_trim"
    NORMALIZE = "normalize"
    DONE = "done"
    FAILED = "failed"


def _validate_sample_rate(sample_rate: object) -> int:
    """Return ``sample_rate`` as a positive int, rejecting fractional or non-finite rates."""
    if not isinstance(sample_rate, numbers.Real):
        raise InvalidBufferError(f"sample rate must be a number, got {sample_rate!r}")
    rate = float(sample_rate)
    if not math.isfinite(rate) or not rate.is_integer():
        raise InvalidBufferError(f"sample rate must be whole Hz, got {sample_rate!r}")
    if rate <= 0:
        raise InvalidBufferError(f"sample rate must be positive, got {sample_rate!r}")
    return int(rate)


@dataclass(frozen=True, slots=True, eq=False)
class SampleBuffer:
    """Immutable multi-channel PCM buffer.

    Samples live in one float32 array of shape ``(channel_count, frame_count)``.
    The array is always a private copy of the constructor input and is
    flagged read-only, so a buffer can be shared between concurrent runs
    without any of them observing a mutation.

    Raises:
        InvalidBufferError: No channels, no frames, ragged channel data,
            or a sample rate that is not a positive whole number.
    """

    channels: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        sample_rate = _validate_sample_rate(self.sample_rate)

        try:
            data = np.array(self.channels, dtype=np.float32, copy=True)
        except ValueError as err:
            # Ragged nested sequences cannot form a rectangular array
            raise InvalidBufferError(f"channels have mismatched lengths ({err})") from err

        if data.ndim == 1:
            data = data.reshape(1, -1)
        if data.ndim != 2:
            raise InvalidBufferError(f"expected (channels, frames) data, got {data.ndim} dims")
        if data.shape[0] == 0:
            raise InvalidBufferError("buffer has no channels")
        if data.shape[1] == 0:
            raise InvalidBufferError("buffer has no frames")

        data.setflags(write=False)
        object.__setattr__(self, "channels", data)
        object.__setattr__(self, "sample_rate", sample_rate)

    @classmethod
    def from_channels(cls, channels: Sequence[Sequence[float]], sample_rate: int) -> SampleBuffer:
        """Build a buffer from one sequence of samples per channel.

        Lengths are checked up front so the error reports every channel length.
        """
        if len(channels) == 0:
            raise InvalidBufferError("buffer has no channels")
        lengths = [len(channel) for channel in channels]
        if any(length != lengths[0] for length in lengths):
            raise InvalidBufferError(f"channels have mismatched lengths {lengths}")
        return cls(np.asarray([np.asarray(c, dtype=np.float32) for c in channels]), sample_rate)

    @property
    def channel_count(self) -> int:
        return int(self.channels.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.channels.shape[1])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.frame_count / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        """Read-only view of one channel's samples."""
        return self.channels[index]

    def peak(self) -> float:
        """Maximum absolute sample value across all channels."""
        return float(np.max(np.abs(self.channels)))

    def copy(self) -> SampleBuffer:
        """Return a new buffer with freshly allocated storage."""
        return SampleBuffer(self.channels, self.sample_rate)

    def with_channels(self, channels: np.ndarray) -> SampleBuffer:
        """Return a new buffer holding ``channels`` at this buffer's sample rate."""
        return SampleBuffer(channels, self.sample_rate)
