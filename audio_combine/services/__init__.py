"""Business logic services for audio combining."""

from .audio_manager import AudioCombiner

__all__ = ["AudioCombiner"]
