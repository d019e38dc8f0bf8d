"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/QueueTimer/settings.json

These cover how the app runs (tick rate, animations, export folder,
window geometry).  The alert level and notification toggle are user
preferences and live in ``queuetimer.preferences`` instead.

Usage::

    settings = load_settings()
    settings.rich_animations = False
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "QueueTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All app-level configuration."""

    # ── timer ─────────────────────────────────────────────────────────
    tick_interval_ms: int = 100

    # ── animation ─────────────────────────────────────────────────────
    rich_animations: bool = True
    exit_animation_ms: int = 500

    # ── export ────────────────────────────────────────────────────────
    export_dir: str | None = None

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 760
    window_height: int = 640
    always_on_top: bool = False

    def resolved_export_dir(self) -> Path:
        """Configured export folder, else ~/Downloads, else home."""
        if self.export_dir:
            return Path(self.export_dir).expanduser()
        downloads = Path.home() / "Downloads"
        return downloads if downloads.is_dir() else Path.home()


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except Exception:
        logger.warning("Unreadable settings at %s; using defaults", SETTINGS_PATH)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
