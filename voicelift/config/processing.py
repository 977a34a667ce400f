"""Per-run enhancement configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from voicelift._audio_constants import (
    DEFAULT_NOISE_REDUCTION,
    DEFAULT_SILENCE_REMOVAL,
    DEFAULT_SILENCE_THRESHOLD,
    DEFAULT_TARGET_VOLUME,
    DEFAULT_VOICE_ENHANCEMENT,
    DEFAULT_VOLUME_NORMALIZATION,
)


class ProcessingSettings(BaseModel):
    """Settings for one enhancement run.

    Each stage is toggled independently: an intensity of 0 or a False flag
    means the pipeline skips the stage entirely. Defaults are imported from
    ``_audio_constants`` (single source of truth shared with
    ``EnhancementDefaults``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    noise_reduction: float = Field(default=DEFAULT_NOISE_REDUCTION, ge=0.0, le=1.0)
    voice_enhancement: float = Field(default=DEFAULT_VOICE_ENHANCEMENT, ge=0.0, le=1.0)
    silence_removal: bool = DEFAULT_SILENCE_REMOVAL
    silence_threshold: float = Field(default=DEFAULT_SILENCE_THRESHOLD, gt=0.0, lt=1.0)
    volume_normalization: bool = DEFAULT_VOLUME_NORMALIZATION
    target_volume: float = Field(default=DEFAULT_TARGET_VOLUME, gt=0.0, le=1.0)

    @classmethod
    def from_env(cls) -> ProcessingSettings:
        """Build settings from ``VOICELIFT_*`` environment defaults."""
        from voicelift.config.settings import get_settings

        defaults = get_settings().defaults
        return cls(**defaults.model_dump())
