"""Run log list shown under the timer window.

One row per ``RunLogEntry`` in the order they were written::

    5 Min Focus | Planned: 5:00 | Started: ... | Ended: ... | Actual: 5:01
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from ..timer.duration import format_duration
from ..timer.models import RunLogEntry
from .styles import PALETTE


def _local(ts: datetime) -> str:
    return ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def describe_entry(entry: RunLogEntry) -> str:
    text = (
        f"{entry.label} | Planned: {format_duration(entry.planned_duration_ms)}"
        f" | Started: {_local(entry.started_at)}"
        f" | Ended: {_local(entry.ended_at)}"
        f" | Actual: {format_duration(entry.actual_elapsed_ms)}"
    )
    if not entry.ran_to_plan:
        text += " (stopped early)"
    return text


class RunLogWidget(QWidget):
    """Read-only rendering of the run log."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._row_widgets: list[QLabel] = []
        self._build_ui()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        header = QLabel("Run Log")
        header.setStyleSheet(
            f"font-size: 13px; font-weight: 600; color: {PALETTE['text_muted']};"
        )
        layout.addWidget(header)

        self._rows_container = QVBoxLayout()
        self._rows_container.setSpacing(4)
        layout.addLayout(self._rows_container)

        self._empty_label = QLabel("Nothing has run yet.")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setStyleSheet(
            f"font-size: 12px; color: {PALETTE['border']};"
        )
        layout.addWidget(self._empty_label)

    # ── refresh ───────────────────────────────────────────────────────

    @property
    def row_texts(self) -> list[str]:
        return [w.text() for w in self._row_widgets]

    def refresh(self, entries: Iterable[RunLogEntry]) -> None:
        for w in self._row_widgets:
            w.setParent(None)
            w.deleteLater()
        self._row_widgets.clear()

        for entry in entries:
            row = QLabel(describe_entry(entry), self)
            row.setWordWrap(True)
            row.setStyleSheet("font-size: 12px;")
            self._rows_container.addWidget(row)
            self._row_widgets.append(row)

        self._empty_label.setVisible(not self._row_widgets)
