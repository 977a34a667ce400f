"""Enhancement Pipeline.

Cleans up recorded speech before playback or export.
Pipeline: Input -> [Noise Gate] -> [Voice Enhance] -> [Silence Trim] -> [Normalize] -> Output.
"""

from __future__ import annotations

from voicelift.enhancement.pipeline import (
    EnhancementPipeline,
    EnhancementResult,
    build_stages,
    enhance,
    enhance_async,
)
from voicelift.enhancement.stages import EnhancementStage

__all__ = [
    "EnhancementPipeline",
    "EnhancementResult",
    "EnhancementStage",
    "build_stages",
    "enhance",
    "enhance_async",
]
