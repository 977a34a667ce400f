"""voicelift — speech/music enhancement engine.

Runs a decoded PCM buffer through noise gating, voice emphasis,
silence trimming and peak normalization, and exports 16-bit PCM WAV.
"""

from __future__ import annotations

from voicelift._types import PipelineState, SampleBuffer
from voicelift.config.processing import ProcessingSettings
from voicelift.enhancement.pipeline import EnhancementPipeline, enhance, enhance_async
from voicelift.export.wav import encode_wav

__version__ = "0.1.0"

__all__ = [
    "EnhancementPipeline",
    "PipelineState",
    "ProcessingSettings",
    "SampleBuffer",
    "__version__",
    "encode_wav",
    "enhance",
    "enhance_async",
]
