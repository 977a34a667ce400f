"""Centralized configuration via pydantic-settings.

All ``VOICELIFT_*`` environment variables are read, validated, and exposed here.
Logging env vars (``VOICELIFT_LOG_FORMAT``, ``VOICELIFT_LOG_LEVEL``) are
intentionally excluded; they stay in ``voicelift.logging`` for bootstrap-safety.

Usage::

    from voicelift.config.settings import get_settings

    settings = get_settings()
    print(settings.defaults.target_volume)        # float, validated
    print(settings.engine.highpass_reference_rate) # int | None

``.env`` files in the working directory are loaded automatically.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voicelift._audio_constants import (
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_NOISE_REDUCTION,
    DEFAULT_SILENCE_REMOVAL,
    DEFAULT_SILENCE_THRESHOLD,
    DEFAULT_TARGET_VOLUME,
    DEFAULT_VOICE_ENHANCEMENT,
    DEFAULT_VOLUME_NORMALIZATION,
)


class EnhancementDefaults(BaseSettings):
    """Default values for every ``ProcessingSettings`` field."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    noise_reduction: float = Field(
        default=DEFAULT_NOISE_REDUCTION,
        ge=0.0,
        le=1.0,
        validation_alias="VOICELIFT_NOISE_REDUCTION",
    )
    voice_enhancement: float = Field(
        default=DEFAULT_VOICE_ENHANCEMENT,
        ge=0.0,
        le=1.0,
        validation_alias="VOICELIFT_VOICE_ENHANCEMENT",
    )
    silence_removal: bool = Field(
        default=DEFAULT_SILENCE_REMOVAL, validation_alias="VOICELIFT_SILENCE_REMOVAL"
    )
    silence_threshold: float = Field(
        default=DEFAULT_SILENCE_THRESHOLD,
        gt=0.0,
        lt=1.0,
        validation_alias="VOICELIFT_SILENCE_THRESHOLD",
    )
    volume_normalization: bool = Field(
        default=DEFAULT_VOLUME_NORMALIZATION, validation_alias="VOICELIFT_VOLUME_NORMALIZATION"
    )
    target_volume: float = Field(
        default=DEFAULT_TARGET_VOLUME, gt=0.0, le=1.0, validation_alias="VOICELIFT_TARGET_VOLUME"
    )


class EngineSettings(BaseSettings):
    """DSP engine tuning."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    # Unset: the high-pass filter uses each buffer's own sample rate.
    highpass_reference_rate: int | None = Field(
        default=None,
        ge=1000,
        le=384_000,
        validation_alias="VOICELIFT_HIGHPASS_REFERENCE_RATE",
    )


class IOSettings(BaseSettings):
    """Input decoding limits."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    max_file_size_mb: int = Field(
        default=DEFAULT_MAX_FILE_SIZE_MB,
        ge=1,
        le=2048,
        validation_alias="VOICELIFT_MAX_FILE_SIZE_MB",
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum input size in bytes (derived from MB setting)."""
        return self.max_file_size_mb * 1024 * 1024


class VoiceliftSettings(BaseSettings):
    """Root settings; aggregates all subsystem settings.

    Loads ``.env`` from the current directory when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    defaults: EnhancementDefaults = Field(default_factory=EnhancementDefaults)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    io: IOSettings = Field(default_factory=IOSettings)


@lru_cache(maxsize=1)
def get_settings() -> VoiceliftSettings:
    """Return the singleton ``VoiceliftSettings`` instance.

    The result is cached; subsequent calls return the same object.
    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    return VoiceliftSettings()
