"""SilenceTrimStage — excise long pauses, keeping natural breathing room.

Silence is detected on channel 0 with consecutive 100 ms RMS windows.
A run of quiet windows lasting at least 1 s becomes a removable region
after 0.4 s of padding is given back at each end. The cut is applied to
every channel so they stay frame-aligned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from voicelift._audio_constants import (
    PROGRESS_SILENCE,
    SILENCE_MIN_DURATION_S,
    SILENCE_MIN_REMOVED_S,
    SILENCE_PADDING_S,
    SILENCE_WINDOW_S,
)
from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.stages import EnhancementStage
from voicelift.logging import get_logger

logger = get_logger("enhancement.silence_trim")


@dataclass(frozen=True, slots=True)
class SilenceRegion:
    """Half-open frame range ``[start, end)`` to remove."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def window_rms(audio: np.ndarray, window_size: int) -> np.ndarray:
    """RMS of each consecutive full window of ``audio``.

    A trailing partial window is ignored.
    """
    n_windows = len(audio) // window_size
    if n_windows == 0:
        return np.empty(0, dtype=np.float64)
    frames = audio[: n_windows * window_size].astype(np.float64).reshape(n_windows, window_size)
    return np.sqrt(np.mean(frames * frames, axis=1))


def quiet_runs(quiet: np.ndarray) -> list[tuple[int, int]]:
    """Maximal runs of True values as ``(first, last + 1)`` window indices."""
    runs: list[tuple[int, int]] = []
    run_start = -1
    for index, is_quiet in enumerate(quiet):
        if is_quiet and run_start == -1:
            run_start = index
        elif not is_quiet and run_start != -1:
            runs.append((run_start, index))
            run_start = -1
    if run_start != -1:
        runs.append((run_start, len(quiet)))
    return runs


class SilenceTrimStage(EnhancementStage):
    """Remove long quiet regions from all channels.

    Args:
        threshold: Window RMS below which a window counts as quiet.
        window_s: Analysis window length in seconds.
        min_silence_s: Minimum quiet span that qualifies for removal.
        padding_s: Silence kept at each end of a removed region.
        min_removed_s: Below this total, the buffer is returned unchanged.
    """

    def __init__(
        self,
        threshold: float,
        window_s: float = SILENCE_WINDOW_S,
        min_silence_s: float = SILENCE_MIN_DURATION_S,
        padding_s: float = SILENCE_PADDING_S,
        min_removed_s: float = SILENCE_MIN_REMOVED_S,
    ) -> None:
        if threshold <= 0:
            msg = f"threshold must be positive, got {threshold}"
            raise ValueError(msg)
        self._threshold = threshold
        self._window_s = window_s
        self._min_silence_s = min_silence_s
        self._padding_s = padding_s
        self._min_removed_s = min_removed_s

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "silence_trim"

    @property
    def state(self) -> PipelineState:
        return PipelineState.SILENCE_TRIM

    @property
    def progress_label(self) -> str:
        return PROGRESS_SILENCE

    @property
    def threshold(self) -> float:
        return self._threshold

    def find_regions(self, buffer: SampleBuffer) -> list[SilenceRegion]:
        """Locate removable regions on channel 0.

        Regions come back sorted by start and never overlap, since each
        one is carved out of a distinct run of windows.
        """
        sample_rate = buffer.sample_rate
        window_size = math.floor(self._window_s * sample_rate)
        if window_size <= 0:
            return []

        min_silence = math.floor(self._min_silence_s * sample_rate)
        padding = math.floor(self._padding_s * sample_rate)

        quiet = window_rms(buffer.channel(0), window_size) < self._threshold

        regions: list[SilenceRegion] = []
        for first, stop in quiet_runs(quiet):
            span_start = first * window_size
            span_end = stop * window_size
            if span_end - span_start < min_silence:
                continue
            region = SilenceRegion(start=span_start + padding, end=span_end - padding)
            if region.length > 0:
                regions.append(region)
        return regions

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Cut qualifying regions from every channel.

        Returns:
            The input itself when nothing qualifies or too little would be
            removed, otherwise a shorter buffer with the kept spans spliced
            together in order.
        """
        regions = self.find_regions(buffer)
        removed = sum(region.length for region in regions)

        if not regions or removed < self._min_removed_s * buffer.sample_rate:
            logger.debug(
                "silence_trim_skipped",
                regions=len(regions),
                removed_frames=removed,
            )
            return buffer

        keep = np.ones(buffer.frame_count, dtype=bool)
        for region in regions:
            keep[region.start : region.end] = False

        logger.debug(
            "silence_regions_found",
            regions=len(regions),
            removed_frames=removed,
            removed_s=round(removed / buffer.sample_rate, 3),
        )
        return buffer.with_channels(buffer.channels[:, keep])
