"""Alert beeps synthesized with numpy and played through QSoundEffect.

Each alert level is a single 300 ms sine beep that fades exponentially
to 1 % of its peak, so it never ends on a click.  Levels differ in pitch
and loudness:

========  =========  ======
level     frequency  gain
========  =========  ======
off       —          0
soft      800 Hz     0.1
medium    1000 Hz    0.3
loud      1200 Hz    0.5
========  =========  ======

WAV files are cached to disk so later launches skip synthesis.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "QueueTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100
BEEP_SECONDS = 0.3
FADE_FLOOR = 0.01


@dataclass(frozen=True)
class BeepProfile:
    gain: float
    frequency: float


SOUND_LEVELS: dict[str, BeepProfile] = {
    "off": BeepProfile(gain=0.0, frequency=0.0),
    "soft": BeepProfile(gain=0.1, frequency=800.0),
    "medium": BeepProfile(gain=0.3, frequency=1000.0),
    "loud": BeepProfile(gain=0.5, frequency=1200.0),
}


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _fade(length: int, floor: float = FADE_FLOOR) -> np.ndarray:
    """Exponential ramp 1.0 → *floor* across *length* samples."""
    return np.power(floor, np.linspace(0.0, 1.0, length))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def generate_beep(level: str) -> bytes:
    """WAV bytes for the *level* alert.  ``off`` gives silence."""
    profile = SOUND_LEVELS[level]
    if profile.gain == 0:
        return _to_wav_bytes(np.zeros(int(SAMPLE_RATE * BEEP_SECONDS)))
    tone = _sine(profile.frequency, BEEP_SECONDS)
    return _to_wav_bytes(tone * profile.gain * _fade(len(tone)))


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Owns one QSoundEffect per audible alert level.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.play_level("medium")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        try:
            self._ensure_wav_files()
            self._load_effects()
        except OSError:
            logger.exception("Alert sounds unavailable in %s", self._sounds_dir)
            self._effects.clear()

    # ── public API ────────────────────────────────────────────────────

    @staticmethod
    def levels() -> tuple[str, ...]:
        return tuple(SOUND_LEVELS)

    def play_level(self, level: str) -> bool:
        """Play the beep for *level*.  Returns whether anything played.

        Case-insensitive.  ``off`` and unknown levels play nothing.
        """
        normalized = level.lower() if isinstance(level, str) else ""
        if normalized not in SOUND_LEVELS:
            logger.warning("Unknown sound level: %r", level)
            return False
        if SOUND_LEVELS[normalized].gain == 0:
            return False
        effect = self._effects.get(normalized)
        if effect is None:
            logger.error("No sound loaded for level %r", normalized)
            return False
        effect.play()
        logger.debug("Playing %s alert", normalized)
        return True

    # ── internal ──────────────────────────────────────────────────────

    def _path_for(self, level: str) -> Path:
        return self._sounds_dir / f"alert_{level}.wav"

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for level, profile in SOUND_LEVELS.items():
            if profile.gain == 0:
                continue
            path = self._path_for(level)
            if not path.exists():
                path.write_bytes(generate_beep(level))

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for level, profile in SOUND_LEVELS.items():
            path = self._path_for(level)
            if profile.gain == 0 or not path.exists():
                continue
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            # gain is baked into the samples
            effect.setVolume(1.0)
            self._effects[level] = effect
