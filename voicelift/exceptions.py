"""Typed exceptions for voicelift.

Hierarchy:
    VoiceliftError (base)
    +-- AudioError
    |   +-- InvalidBufferError
    |   +-- AudioFormatError
    |   +-- AudioTooLargeError
    +-- StageFailureError (wrapped at the pipeline boundary, never raised to callers)
"""

from __future__ import annotations


class VoiceliftError(Exception):
    """Base for all voicelift exceptions."""


# --- Audio ---


class AudioError(VoiceliftError):
    """Audio processing error."""


class InvalidBufferError(AudioError):
    """Sample buffer is malformed (no channels, no frames, ragged channels).

    Raised by SampleBuffer construction. The enhancement pipeline never
    catches it: malformed input must be rejected before a run starts.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid sample buffer: {detail}")


class AudioFormatError(AudioError):
    """Unsupported or invalid audio format."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid audio format: {detail}")


class AudioTooLargeError(AudioError):
    """Audio file exceeds the allowed limit."""

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        size_mb = size_bytes / (1024 * 1024)
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(f"Audio file ({size_mb:.1f}MB) exceeds the {max_mb:.1f}MB limit")


# --- Enhancement ---


class StageFailureError(VoiceliftError):
    """An enhancement stage raised while processing a buffer.

    Built by EnhancementPipeline from the original exception (kept as
    ``__cause__``) and attached to the run result.
    """

    def __init__(self, stage: str, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"Stage '{stage}' failed: {reason}")
