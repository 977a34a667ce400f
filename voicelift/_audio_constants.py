"""Centralized audio format and DSP constants for the enhancement engine.

Single source of truth for PCM format parameters, stage tuning values,
and progress labels shared across stages, the pipeline, export, and CLI.
"""

from __future__ import annotations

# --- PCM 16-bit format ---
# Signed 16-bit integer range: [-32768, 32767]
PCM_INT16_MAX: int = 32767
# Export quantizes with 32767 so +1.0 and -1.0 map symmetrically.
PCM_INT16_SCALE: float = 32767.0

# PCM 8-bit (unsigned): center value and scale for [-1.0, ~1.0] normalization.
PCM_UINT8_SCALE: float = 128.0

# Bytes per sample for 16-bit PCM.
BYTES_PER_SAMPLE_INT16: int = 2

# --- Noise gate ---
NOISE_FLOOR_PERCENTILE: float = 0.2
NOISE_GATE_THRESHOLD_SPAN: float = 3.0
NOISE_GATE_MAX_REDUCTION: float = 0.5

# --- Voice enhancement ---
HIGHPASS_CUTOFF_HZ: float = 80.0
# Legacy fixed rate the filter was originally tuned against.
LEGACY_HIGHPASS_SAMPLE_RATE: int = 44100
HIGHPASS_WET_MIX: float = 0.2
EMPHASIS_AMOUNT: float = 0.3
EMPHASIS_MIX: float = 0.2
COMPRESSOR_THRESHOLD: float = 0.7
COMPRESSOR_WET_MIX: float = 0.3

# --- Silence trimming (seconds) ---
SILENCE_WINDOW_S: float = 0.1
SILENCE_MIN_DURATION_S: float = 1.0
SILENCE_PADDING_S: float = 0.4
SILENCE_MIN_REMOVED_S: float = 0.5

# --- Normalization ---
NORMALIZE_HEADROOM: float = 0.95
NORMALIZE_DEADBAND_LOW: float = 0.8
NORMALIZE_DEADBAND_HIGH: float = 1.2

# --- Processing defaults (single source of truth for settings + per-run config) ---
DEFAULT_NOISE_REDUCTION: float = 0.2
DEFAULT_VOICE_ENHANCEMENT: float = 0.3
DEFAULT_SILENCE_REMOVAL: bool = True
DEFAULT_SILENCE_THRESHOLD: float = 0.005
DEFAULT_VOLUME_NORMALIZATION: bool = True
DEFAULT_TARGET_VOLUME: float = 0.8

# --- Input limits ---
DEFAULT_MAX_FILE_SIZE_MB: int = 100

# --- Progress labels ---
PROGRESS_STARTING: str = "Starting enhancement..."
PROGRESS_NOISE: str = "Reducing background noise..."
PROGRESS_VOICE: str = "Enhancing voice clarity..."
PROGRESS_SILENCE: str = "Removing long pauses..."
PROGRESS_NORMALIZE: str = "Normalizing audio levels..."
PROGRESS_COMPLETE: str = "Enhancement complete!"
PROGRESS_FAILED: str = "Enhancement failed - using original audio"
