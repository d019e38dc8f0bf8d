"""Main application window for QueueTimer."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QCheckBox, QComboBox, QFrame, QHBoxLayout, QLabel, QLineEdit,
    QMainWindow, QMenu, QPushButton, QScrollArea, QSpinBox, QStatusBar,
    QSystemTrayIcon, QVBoxLayout, QWidget,
)

from .audio.sounds import SoundManager
from .notifications import TrayNotifier, notifications_supported
from .preferences import ALERT_LEVELS, DatabaseBackend, PreferenceStore
from .settings import Settings, load_settings, save_settings
from .timer.context import RunContext
from .timer.effects import TimerEffects
from .timer.engine import TimerEngine, TimerState
from .timer.models import TimerSpec
from .timer.run_log import export_run_log
from .ui.animations import Animator, create_animator
from .ui.run_log_view import RunLogWidget
from .ui.styles import PALETTE, build_stylesheet
from .ui.timer_block import TimerBlock

logger = logging.getLogger(__name__)

# (button text, label, duration ms)
PRESETS: tuple[tuple[str, str, int], ...] = (
    ("5 Min", "5 Min Focus", 5 * 60_000),
    ("1 Min", "1 Min Breath", 60_000),
)


def _make_tray_icon() -> QIcon:
    size = 64
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor(PALETTE["accent"]))
    p.setPen(QColor(PALETTE["accent"]).darker(120))
    p.drawEllipse(4, 4, size - 8, size - 8)
    p.end()
    return QIcon(pixmap)


# ── side effects wired to the window ─────────────────────────────────────


class WindowEffects(TimerEffects):
    """Puts engine side effects on screen and through the speakers."""

    def __init__(
        self,
        queue_bar: QHBoxLayout,
        timer_window: QVBoxLayout,
        animator: Animator,
        sound_manager: SoundManager,
        notifier: TrayNotifier,
        on_delete: Callable[[str], None],
    ) -> None:
        self._queue_bar = queue_bar
        self._timer_window = timer_window
        self._animator = animator
        self._sound_manager = sound_manager
        self._notifier = notifier
        self._on_delete = on_delete

    def render_block(self, spec: TimerSpec) -> TimerBlock:
        block = TimerBlock(spec)
        block.delete_requested.connect(self._on_delete)
        # keep the trailing stretch last
        self._queue_bar.insertWidget(self._queue_bar.count() - 1, block)
        return block

    def remove_block(self, block: TimerBlock | None) -> None:
        if block is None:
            return
        block.setParent(None)
        block.deleteLater()

    def highlight(self, blocks: Sequence[TimerBlock | None]) -> None:
        for block in blocks:
            if block is not None:
                block.set_highlighted(True)

    def animate_progress(self, block: TimerBlock | None, duration_ms: int):
        if block is None:
            return None
        self._timer_window.addWidget(block)
        block.set_running(True)
        return self._animator.animate_progress(block, duration_ms)

    def animate_exit(self, block: TimerBlock | None, on_finished: Callable[[], None]):
        if block is None:
            on_finished()
            return None
        return self._animator.animate_exit(block, on_finished)

    def play_alert(self, level: str) -> None:
        self._sound_manager.play_level(level)

    def notify(self, label: str) -> None:
        self._notifier.notify(label)


# ── main window ──────────────────────────────────────────────────────────


class QueueTimerApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        preferences: PreferenceStore | None = None,
        sound_manager: SoundManager | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("QueueTimer")
        self.setMinimumSize(640, 520)

        # ── geometry save timer ───────────────────────────────────────
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        # ── settings + preferences ────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._preferences = preferences or PreferenceStore(DatabaseBackend()).load()

        # ── services ──────────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon())
        self._tray_icon.setToolTip("QueueTimer")
        self._notifier = TrayNotifier(self._tray_icon)
        self._animator = create_animator(
            self._settings.rich_animations, self._settings.exit_animation_ms,
        )
        logger.debug("Using %s animations", self._animator.name)

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(10)

        root_layout.addWidget(self._build_add_bar(central))
        root_layout.addWidget(self._build_queue_bar(central))
        root_layout.addWidget(self._build_timer_window(central))
        root_layout.addLayout(self._build_run_controls())
        root_layout.addWidget(self._build_preferences_row(central))
        root_layout.addWidget(self._build_log_panel(central), 1)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Add a timer to get started")

        # ── engine ────────────────────────────────────────────────────
        effects = WindowEffects(
            self._queue_bar_layout,
            self._timer_window_layout,
            self._animator,
            self._sound_manager,
            self._notifier,
            on_delete=self._on_delete_requested,
        )
        engine_kwargs = {"clock": clock} if clock is not None else {}
        self._timer_engine = TimerEngine(
            RunContext(preferences=self._preferences),
            self,
            effects=effects,
            tick_interval_ms=self._settings.tick_interval_ms,
            **engine_kwargs,
        )

        # ── tray ──────────────────────────────────────────────────────
        self._build_tray_menu()
        self._tray_icon.show()

        # ── wire signals ──────────────────────────────────────────────
        self._timer_engine.state_changed.connect(self._on_state_changed)
        self._timer_engine.tick.connect(self._on_tick)
        self._timer_engine.run_log_changed.connect(self._refresh_log)
        self._timer_engine.start_rejected.connect(self._on_start_rejected)
        self._timer_engine.timer_completed.connect(self._on_timer_completed)
        self._timer_engine.queue_finished.connect(self._on_queue_finished)

        self._sync_preference_controls()
        self._refresh_log()

        # ── restore window state ───────────────────────────────────────
        self._restore_geometry()
        if self._settings.always_on_top:
            self.setWindowFlags(self.windowFlags() | Qt.WindowType.WindowStaysOnTopHint)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._timer_engine

    @property
    def preferences(self) -> PreferenceStore:
        return self._preferences

    # ══════════════════════════════════════════════════════════════════
    #  LAYOUT
    # ══════════════════════════════════════════════════════════════════

    def _build_add_bar(self, parent: QWidget) -> QWidget:
        bar = QFrame(parent)
        bar.setObjectName("card")
        row = QHBoxLayout(bar)
        row.setContentsMargins(12, 8, 12, 8)
        row.setSpacing(8)

        self._preset_buttons: list[QPushButton] = []
        for text, label, duration_ms in PRESETS:
            btn = QPushButton(text, bar)
            btn.setToolTip(f"Queue “{label}”")
            btn.clicked.connect(
                lambda _=False, l=label, d=duration_ms: self._add_timer(l, d)
            )
            row.addWidget(btn)
            self._preset_buttons.append(btn)

        row.addSpacing(12)

        self._minutes_input = QSpinBox(bar)
        self._minutes_input.setRange(1, 600)
        self._minutes_input.setValue(10)
        self._minutes_input.setSuffix(" min")
        row.addWidget(self._minutes_input)

        self._label_input = QLineEdit(bar)
        self._label_input.setPlaceholderText("Label (optional)")
        self._label_input.setMaxLength(100)
        self._label_input.returnPressed.connect(self._on_add_custom)
        row.addWidget(self._label_input, 1)

        self._add_btn = QPushButton("Add", bar)
        self._add_btn.clicked.connect(self._on_add_custom)
        row.addWidget(self._add_btn)
        return bar

    def _build_queue_bar(self, parent: QWidget) -> QWidget:
        scroll = QScrollArea(parent)
        scroll.setWidgetResizable(True)
        scroll.setFixedHeight(130)
        inner = QWidget(scroll)
        self._queue_bar_layout = QHBoxLayout(inner)
        self._queue_bar_layout.setContentsMargins(4, 4, 4, 4)
        self._queue_bar_layout.setSpacing(8)
        self._queue_bar_layout.addStretch()
        scroll.setWidget(inner)
        return scroll

    def _build_timer_window(self, parent: QWidget) -> QWidget:
        frame = QFrame(parent)
        frame.setObjectName("card")
        frame.setMinimumHeight(150)
        self._timer_window_layout = QVBoxLayout(frame)
        self._timer_window_layout.setContentsMargins(16, 12, 16, 12)
        self._timer_window_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        return frame

    def _build_run_controls(self) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setSpacing(12)
        row.addStretch()

        self._start_btn = QPushButton("Start Queue")
        self._start_btn.setObjectName("primaryButton")
        self._start_btn.clicked.connect(self._on_start_queue)

        self._clear_all_btn = QPushButton("Clear All")
        self._clear_all_btn.setObjectName("dangerButton")
        self._clear_all_btn.clicked.connect(self._on_clear_all)

        row.addWidget(self._start_btn)
        row.addWidget(self._clear_all_btn)
        row.addStretch()
        return row

    def _build_preferences_row(self, parent: QWidget) -> QWidget:
        box = QWidget(parent)
        row = QHBoxLayout(box)
        row.setContentsMargins(0, 0, 0, 0)

        row.addWidget(QLabel("Sound alert:", box))
        self._alert_combo = QComboBox(box)
        self._alert_combo.addItems(ALERT_LEVELS)
        self._alert_combo.currentTextChanged.connect(self._on_alert_level_changed)
        row.addWidget(self._alert_combo)

        row.addSpacing(16)
        self._notify_check = QCheckBox("Desktop notifications", box)
        self._notify_check.toggled.connect(self._on_notifications_toggled)
        row.addWidget(self._notify_check)
        row.addStretch()
        return box

    def _build_log_panel(self, parent: QWidget) -> QWidget:
        panel = QWidget(parent)
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        scroll = QScrollArea(panel)
        scroll.setWidgetResizable(True)
        self._run_log_view = RunLogWidget(scroll)
        scroll.setWidget(self._run_log_view)
        layout.addWidget(scroll, 1)

        row = QHBoxLayout()
        row.addStretch()
        self._clear_log_btn = QPushButton("Clear Log", panel)
        self._clear_log_btn.clicked.connect(self._on_clear_log)
        self._export_log_btn = QPushButton("Export Log", panel)
        self._export_log_btn.clicked.connect(self._on_export_log)
        row.addWidget(self._clear_log_btn)
        row.addWidget(self._export_log_btn)
        layout.addLayout(row)
        return panel

    # ══════════════════════════════════════════════════════════════════
    #  SYSTEM TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        start_action = menu.addAction("Start Queue")
        start_action.triggered.connect(self._on_start_queue)
        clear_action = menu.addAction("Clear All")
        clear_action.triggered.connect(self._on_clear_all)
        menu.addSeparator()
        show_action = menu.addAction("Show QueueTimer")
        show_action.triggered.connect(self._show_window)
        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self.close)
        self._tray_icon.setContextMenu(menu)

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    # ══════════════════════════════════════════════════════════════════
    #  USER ACTIONS
    # ══════════════════════════════════════════════════════════════════

    def _add_timer(self, label: str, duration_ms: int) -> None:
        spec = self._timer_engine.add_timer(label, duration_ms)
        self._status_bar.showMessage(f"Queued {spec.label}")

    def _on_add_custom(self) -> None:
        minutes = self._minutes_input.value()
        self._add_timer(self._label_input.text().strip(), minutes * 60_000)
        self._label_input.clear()

    def _on_start_queue(self) -> None:
        engine = self._timer_engine
        if not engine.start() and not engine.is_running and engine.queue.is_empty:
            self._status_bar.showMessage("The queue is empty")

    def _on_clear_all(self) -> None:
        self._timer_engine.clear_all()

    def _on_delete_requested(self, identity: str) -> None:
        self._timer_engine.cancel(identity)

    def _on_clear_log(self) -> None:
        self._timer_engine.clear_log()

    def _on_export_log(self) -> None:
        try:
            path = export_run_log(
                self._timer_engine.run_log, self._settings.resolved_export_dir(),
            )
        except OSError:
            logger.exception("Run log export failed")
            self._status_bar.showMessage("Could not export the run log")
            return
        self._status_bar.showMessage(f"Run log saved to {path}")

    def _on_alert_level_changed(self, level: str) -> None:
        effective = self._preferences.set_alert_level(level)
        if effective != "off":
            self._sound_manager.play_level(effective)

    def _on_notifications_toggled(self, checked: bool) -> None:
        self._preferences.set_notifications_enabled(checked)

    def _sync_preference_controls(self) -> None:
        self._alert_combo.blockSignals(True)
        self._alert_combo.setCurrentText(self._preferences.alert_level)
        self._alert_combo.blockSignals(False)

        if not notifications_supported():
            self._notify_check.setVisible(False)
            if self._preferences.notifications_enabled:
                logger.info("Notifications unavailable; turning them off")
                self._preferences.set_notifications_enabled(False)
            return
        self._notify_check.blockSignals(True)
        self._notify_check.setChecked(self._preferences.notifications_enabled)
        self._notify_check.blockSignals(False)

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        self._start_btn.setEnabled(state == TimerState.IDLE)
        if state == TimerState.RUNNING and self._timer_engine.active is not None:
            self._status_bar.showMessage(
                f"Running {self._timer_engine.active.spec.label}"
            )
        elif state == TimerState.IDLE:
            self._status_bar.showMessage("Ready")

    def _on_tick(self, identity: str, remaining_ms: int) -> None:
        block = self._timer_engine.block_for(identity)
        if block is not None:
            block.set_remaining(remaining_ms)

    def _on_start_rejected(self, message: str) -> None:
        self._status_bar.showMessage(message, 3000)

    def _on_timer_completed(self, entry) -> None:
        self._status_bar.showMessage(f"{entry.label} completed")

    def _on_queue_finished(self) -> None:
        self._status_bar.showMessage("All timers finished")

    def _refresh_log(self) -> None:
        self._run_log_view.refresh(self._timer_engine.run_log)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        """Restore window position and size from settings."""
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        """Persist current window geometry to settings."""
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        self._timer_engine.clear_all()
        self._tray_icon.hide()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space starts the queue, Escape clears everything."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            if not self._label_input.hasFocus():
                self._on_start_queue()
                event.accept()
                return
        if key == Qt.Key.Key_Escape:
            self._on_clear_all()
            event.accept()
            return
        super().keyPressEvent(event)
