"""NormalizeStage — peak normalization with headroom and a no-op deadband.

Scales the whole buffer so its peak lands at 95% of the target. Gains
close to unity (between 0.8 and 1.2) are skipped to avoid audible gain
pumping on material that is already near the target.
"""

from __future__ import annotations

import numpy as np

from voicelift._audio_constants import (
    NORMALIZE_DEADBAND_HIGH,
    NORMALIZE_DEADBAND_LOW,
    NORMALIZE_HEADROOM,
    PROGRESS_NORMALIZE,
)
from voicelift._types import PipelineState, SampleBuffer
from voicelift.enhancement.stages import EnhancementStage
from voicelift.logging import get_logger

logger = get_logger("enhancement.normalize")


def normalization_factor(peak: float, target_peak: float) -> float:
    """Gain that brings ``peak`` to the headroom-adjusted target.

    Silent input (peak 0) gets unity gain.
    """
    if peak <= 0:
        return 1.0
    return (target_peak * NORMALIZE_HEADROOM) / peak


class NormalizeStage(EnhancementStage):
    """Scale all channels to a safe target peak.

    Args:
        target_peak: Desired peak amplitude in (0, 1]. The stage aims for
            95% of it to leave headroom for export quantization.
    """

    def __init__(self, target_peak: float) -> None:
        if not 0.0 < target_peak <= 1.0:
            msg = f"target_peak must be in (0, 1], got {target_peak}"
            raise ValueError(msg)
        self._target_peak = target_peak

    @property
    def name(self) -> str:
        """Identifier name for the stage."""
        return "normalize"

    @property
    def state(self) -> PipelineState:
        return PipelineState.NORMALIZE

    @property
    def progress_label(self) -> str:
        return PROGRESS_NORMALIZE

    @property
    def target_peak(self) -> float:
        return self._target_peak

    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Normalize the buffer peak.

        Returns:
            A new buffer: an unscaled copy inside the deadband, otherwise
            every sample multiplied by the normalization factor.
        """
        peak = buffer.peak()
        factor = normalization_factor(peak, self._target_peak)

        if NORMALIZE_DEADBAND_LOW < factor < NORMALIZE_DEADBAND_HIGH:
            logger.debug("normalize_skipped", peak=peak, factor=round(factor, 4))
            return buffer.copy()

        logger.debug("normalize_applied", peak=peak, factor=round(factor, 4))
        return buffer.with_channels(buffer.channels.astype(np.float64) * factor)
