"""User preferences: alert level and desktop notifications.

Values go through a small key-value backend.  The app uses
``DatabaseBackend`` (one row per key in SQLite); tests and headless
engines use ``MemoryBackend``.  Persistence is best effort: a failing
backend is logged and the in-memory value still applies.

Usage::

    prefs = PreferenceStore(DatabaseBackend())
    prefs.load()
    prefs.set_alert_level("medium")
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from .database.db import get_session
from .database.models import Preference

logger = logging.getLogger(__name__)

ALERT_LEVELS = ("off", "soft", "medium", "loud")
DEFAULT_ALERT_LEVEL = "off"
DEFAULT_NOTIFICATIONS_ENABLED = False

ALERT_LEVEL_KEY = "alert_level"
NOTIFICATIONS_KEY = "notifications_enabled"

_MISSING = object()


class PreferenceBackend(Protocol):
    def persist(self, key: str, value: Any) -> None: ...

    def retrieve(self, key: str) -> Any: ...


# ── backends ──────────────────────────────────────────────────────────────


class MemoryBackend:
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(initial or {})

    def persist(self, key: str, value: Any) -> None:
        self.values[key] = value

    def retrieve(self, key: str) -> Any:
        return self.values.get(key, _MISSING)


class DatabaseBackend:
    """Stores each key as JSON text in the ``preferences`` table."""

    def persist(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with get_session() as db:
            row = db.get(Preference, key)
            if row is None:
                db.add(Preference(key=key, value=encoded))
            else:
                row.value = encoded

    def retrieve(self, key: str) -> Any:
        with get_session() as db:
            row = db.get(Preference, key)
            if row is None:
                return _MISSING
            raw = row.value
        return json.loads(raw)


# ── store ─────────────────────────────────────────────────────────────────


def normalize_alert_level(level: Any) -> str | None:
    """Lower-cased level if recognised, else ``None``."""
    if not isinstance(level, str):
        return None
    normalized = level.strip().lower()
    return normalized if normalized in ALERT_LEVELS else None


class PreferenceStore:
    """The two user-facing settings the timer engine consults."""

    def __init__(self, backend: PreferenceBackend | None = None) -> None:
        self._backend: PreferenceBackend = backend or MemoryBackend()
        self._alert_level: str = DEFAULT_ALERT_LEVEL
        self._notifications_enabled: bool = DEFAULT_NOTIFICATIONS_ENABLED

    @property
    def alert_level(self) -> str:
        return self._alert_level

    @property
    def notifications_enabled(self) -> bool:
        return self._notifications_enabled

    def set_alert_level(self, level: Any) -> str:
        """Store *level*, or ``off`` with a logged warning if unrecognised.

        Returns the level that actually took effect.
        """
        normalized = normalize_alert_level(level)
        if normalized is None:
            logger.warning(
                "Unknown alert level %r; falling back to %r",
                level, DEFAULT_ALERT_LEVEL,
            )
            normalized = DEFAULT_ALERT_LEVEL
        self._alert_level = normalized
        self._persist(ALERT_LEVEL_KEY, normalized)
        return normalized

    def set_notifications_enabled(self, enabled: bool) -> None:
        self._notifications_enabled = bool(enabled)
        self._persist(NOTIFICATIONS_KEY, self._notifications_enabled)

    def load(self) -> PreferenceStore:
        """Pull both values from the backend, keeping defaults for
        anything missing, unreadable or invalid."""
        level = self._retrieve(ALERT_LEVEL_KEY)
        if level is not _MISSING:
            normalized = normalize_alert_level(level)
            if normalized is None:
                logger.warning("Ignoring stored alert level %r", level)
            self._alert_level = normalized or DEFAULT_ALERT_LEVEL

        enabled = self._retrieve(NOTIFICATIONS_KEY)
        if isinstance(enabled, bool):
            self._notifications_enabled = enabled
        elif enabled is not _MISSING:
            logger.warning("Ignoring stored notifications flag %r", enabled)
        return self

    # ── best-effort persistence ───────────────────────────────────────

    def _persist(self, key: str, value: Any) -> None:
        try:
            self._backend.persist(key, value)
        except Exception:
            logger.exception("Could not save preference %s", key)

    def _retrieve(self, key: str) -> Any:
        try:
            return self._backend.retrieve(key)
        except Exception:
            logger.exception("Could not read preference %s", key)
            return _MISSING
