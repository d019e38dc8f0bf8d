"""Append-only history of finished and cancelled timers, plus JSON export.

Export format (one object per entry, insertion order)::

    [
      {
        "label": "5 Min Focus",
        "plannedDurationMs": 300000,
        "actualDurationMs": 300041,
        "startedAtISO": "2024-01-20T14:25:52.118000+00:00",
        "endedAtISO": "2024-01-20T14:30:52.159000+00:00"
      }
    ]
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from .models import RunLogEntry

logger = logging.getLogger(__name__)


class RunLog:
    """Ordered ``RunLogEntry`` records.  Entries are never edited."""

    def __init__(self) -> None:
        self._entries: list[RunLogEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RunLogEntry]:
        return iter(tuple(self._entries))

    @property
    def entries(self) -> tuple[RunLogEntry, ...]:
        return tuple(self._entries)

    def append(self, entry: RunLogEntry) -> None:
        self._entries.append(entry)

    def clear(self) -> None:
        self._entries.clear()

    def serialize(self) -> str:
        """Export-ready JSON text.  Does not modify the log."""
        return json.dumps([_entry_to_dict(e) for e in self._entries], indent=2)


def _entry_to_dict(entry: RunLogEntry) -> dict:
    return {
        "label": entry.label,
        "plannedDurationMs": entry.planned_duration_ms,
        "actualDurationMs": entry.actual_elapsed_ms,
        "startedAtISO": entry.started_at.isoformat(),
        "endedAtISO": entry.ended_at.isoformat(),
    }


def parse_run_log(text: str) -> list[RunLogEntry]:
    """Inverse of ``RunLog.serialize``."""
    return [
        RunLogEntry(
            label=item["label"],
            planned_duration_ms=int(item["plannedDurationMs"]),
            started_at=datetime.fromisoformat(item["startedAtISO"]),
            ended_at=datetime.fromisoformat(item["endedAtISO"]),
            actual_elapsed_ms=int(item["actualDurationMs"]),
        )
        for item in json.loads(text)
    ]


def log_filename(now: datetime | None = None) -> str:
    """``timer-log-YYYY-MM-DD-HHMMSS.json`` in local time."""
    now = now or datetime.now()
    return f"timer-log-{now:%Y-%m-%d-%H%M%S}.json"


def export_run_log(
    log: RunLog, directory: Path, now: datetime | None = None,
) -> Path:
    """Write ``log`` into *directory* under a timestamped name."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / log_filename(now)
    path.write_text(log.serialize() + "\n", encoding="utf-8")
    logger.info("Exported %d run log entries to %s", len(log), path)
    return path
