"""Audio package."""

from .sounds import SoundManager, SOUND_LEVELS, generate_beep

__all__ = ["SoundManager", "SOUND_LEVELS", "generate_beep"]
