"""One queued or running timer, drawn as a card with a × button."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QProgressBar, QPushButton, QVBoxLayout,
    QWidget,
)

from ..timer.duration import format_duration
from ..timer.models import TimerSpec

PROGRESS_STEPS = 1000


class TimerBlock(QFrame):
    """Visual for a ``TimerSpec``.  Knows nothing about the engine;
    the × button only emits ``delete_requested(identity)``."""

    delete_requested = pyqtSignal(str)

    def __init__(self, spec: TimerSpec, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._spec = spec
        self.setObjectName("timerBlock")
        self.setProperty("queued", False)
        self.setMinimumWidth(140)
        self._build_ui()

    @property
    def identity(self) -> str:
        return self._spec.identity

    @property
    def spec(self) -> TimerSpec:
        return self._spec

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 6, 8, 10)
        layout.setSpacing(2)

        top = QHBoxLayout()
        top.addStretch()
        self._delete_btn = QPushButton("×", self)
        self._delete_btn.setFixedSize(24, 24)
        self._delete_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._delete_btn.setToolTip("Remove this timer")
        self._delete_btn.setStyleSheet("font-size: 18px; padding: 0;")
        self._delete_btn.clicked.connect(
            lambda: self.delete_requested.emit(self._spec.identity)
        )
        top.addWidget(self._delete_btn)
        layout.addLayout(top)

        self._time_label = QLabel(format_duration(self._spec.planned_duration_ms), self)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label.setStyleSheet("font-size: 22px; font-weight: 700;")
        layout.addWidget(self._time_label)

        self._label = QLabel(self._spec.label, self)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setStyleSheet("font-size: 12px;")
        layout.addWidget(self._label)

        self._progress = QProgressBar(self)
        self._progress.setRange(0, PROGRESS_STEPS)
        self._progress.setValue(0)
        self._progress.setTextVisible(False)
        self._progress.setVisible(False)
        layout.addWidget(self._progress)

    # ── display ───────────────────────────────────────────────────────

    @property
    def progress_bar(self) -> QProgressBar:
        return self._progress

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    def set_remaining(self, remaining_ms: int) -> None:
        self._time_label.setText(format_duration(remaining_ms))

    def set_progress(self, fraction: float) -> None:
        fraction = max(0.0, min(1.0, fraction))
        self._progress.setValue(round(fraction * PROGRESS_STEPS))

    def set_running(self, running: bool) -> None:
        self._progress.setVisible(running)
        self.set_highlighted(False)

    def set_highlighted(self, highlighted: bool) -> None:
        self.setProperty("queued", highlighted)
        # re-polish so the [queued="true"] selector takes effect
        self.style().unpolish(self)
        self.style().polish(self)
