"""WAV export of enhanced buffers."""

from __future__ import annotations

from voicelift.export.wav import encode_wav, enhanced_filename, write_wav

__all__ = ["encode_wav", "enhanced_filename", "write_wav"]
