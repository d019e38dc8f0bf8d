"""Queue-running state machine for QueueTimer.

States
------
IDLE         No active timer.  The queue may or may not hold specs.
RUNNING      Exactly one timer is counting down.
COMPLETING   The countdown hit zero; alert, notification and log write
             are in progress.  Brief, and ignores further ticks/starts.

Transitions
-----------
IDLE       → RUNNING             (START, queue non-empty)
RUNNING    → RUNNING             (TICK, time left)
RUNNING    → COMPLETING          (TICK finds the deadline passed → COMPLETE)
COMPLETING → RUNNING | IDLE      (ADVANCE: next spec, or queue exhausted)
RUNNING    → IDLE                (CANCEL naming the active spec, no advance)
Any        → IDLE                (CLEAR: drop everything, log nothing)

START while RUNNING or COMPLETING is rejected with ``start_rejected``.

Every public control goes through ``dispatch()`` and the ``_TRANSITIONS``
table, so (state, event) pairs that aren't listed simply do nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from functools import partial
from typing import Any, Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..preferences import PreferenceStore
from .context import RunContext
from .effects import TimerEffects
from .models import ActiveTimerHandle, CancellationToken, RunLogEntry, TimerSpec
from .queue import TimerQueue
from .run_log import RunLog

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETING = "completing"


class TimerEvent(Enum):
    START = "start"
    TICK = "tick"
    COMPLETE = "complete"
    ADVANCE = "advance"
    CANCEL = "cancel"
    CLEAR = "clear"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 100
ALREADY_RUNNING_MESSAGE = "A timer is already running"

_TRANSITIONS: dict[tuple[TimerState, TimerEvent], str] = {
    (TimerState.IDLE, TimerEvent.START): "_on_start",
    (TimerState.RUNNING, TimerEvent.START): "_on_start_rejected",
    (TimerState.COMPLETING, TimerEvent.START): "_on_start_rejected",
    (TimerState.RUNNING, TimerEvent.TICK): "_on_running_tick",
    (TimerState.RUNNING, TimerEvent.COMPLETE): "_on_complete",
    (TimerState.COMPLETING, TimerEvent.ADVANCE): "_on_advance",
    (TimerState.IDLE, TimerEvent.CANCEL): "_on_remove_queued",
    (TimerState.RUNNING, TimerEvent.CANCEL): "_on_cancel",
    (TimerState.COMPLETING, TimerEvent.CANCEL): "_on_remove_queued",
    (TimerState.IDLE, TimerEvent.CLEAR): "_on_clear",
    (TimerState.RUNNING, TimerEvent.CLEAR): "_on_clear",
    (TimerState.COMPLETING, TimerEvent.CLEAR): "_on_clear",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Runs queued timers one at a time and keeps the run log.

    The engine is the only writer of ``context.run_log``.  All visual,
    audio and notification work goes through ``effects``; any exception
    raised there is logged and otherwise ignored.

    Signals
    -------
    tick(identity: str, remaining_ms: int)
        Display refresh for the active timer, every ``tick_interval_ms``.
    state_changed(new_state: TimerState)
        Emitted on every transition (CLEAR always emits, even from IDLE).
    queue_changed()
        The pending queue gained, lost or reordered entries.
    timer_started(spec: TimerSpec)
    timer_completed(entry: RunLogEntry)
        Natural completion, after the alert/notification and log write.
    timer_cancelled(entry: RunLogEntry)
    run_log_changed()
    start_rejected(message: str)
        ``start()`` was called while a timer is already active.
    queue_finished()
        The last queued timer completed and the engine went IDLE.
    """

    tick = pyqtSignal(str, int)
    state_changed = pyqtSignal(object)
    queue_changed = pyqtSignal()
    timer_started = pyqtSignal(object)
    timer_completed = pyqtSignal(object)
    timer_cancelled = pyqtSignal(object)
    run_log_changed = pyqtSignal()
    start_rejected = pyqtSignal(str)
    queue_finished = pyqtSignal()

    def __init__(
        self,
        context: RunContext | None = None,
        parent: QObject | None = None,
        *,
        effects: TimerEffects | None = None,
        clock: Callable[[], datetime] = _utcnow,
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._context = context or RunContext()
        self._effects = effects or TimerEffects()
        self._clock = clock
        self._tick_interval_ms = tick_interval_ms

        # ── run state ─────────────────────────────────────────────────
        self._state: TimerState = TimerState.IDLE
        self._active: ActiveTimerHandle | None = None

        # identity → whatever render_block returned
        self._blocks: dict[str, Any] = {}
        # exit animations still playing for already-finished timers
        self._exits: list[CancellationToken] = []

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def context(self) -> RunContext:
        return self._context

    @property
    def queue(self) -> TimerQueue:
        return self._context.queue

    @property
    def run_log(self) -> RunLog:
        return self._context.run_log

    @property
    def preferences(self) -> PreferenceStore:
        return self._context.preferences

    @property
    def active(self) -> ActiveTimerHandle | None:
        return self._active

    @property
    def is_running(self) -> bool:
        """True while a timer is active (RUNNING or COMPLETING)."""
        return self._active is not None

    @property
    def remaining_ms(self) -> int:
        if self._active is None:
            return 0
        return self._active.remaining_ms(self._clock())

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the active timer."""
        if self._active is None:
            return 0.0
        planned = self._active.spec.planned_duration_ms
        done = planned - self.remaining_ms
        return max(0.0, min(1.0, done / planned))

    @property
    def pending_exit_count(self) -> int:
        return len(self._exits)

    def block_for(self, identity: str) -> Any:
        return self._blocks.get(identity)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def add_timer(self, label: str, duration_ms: int) -> TimerSpec:
        """Create a spec and put it at the back of the queue."""
        spec = TimerSpec(label=label, planned_duration_ms=duration_ms)
        self.enqueue(spec)
        return spec

    def enqueue(self, spec: TimerSpec) -> bool:
        """Queue *spec*.  ``False`` if it is already queued or active."""
        active = self._active
        if self.queue.contains(spec.identity) or (
            active is not None and active.spec.identity == spec.identity
        ):
            logger.warning("Refusing to queue %s twice", spec.identity)
            return False
        self.queue.enqueue(spec)
        self._blocks[spec.identity] = self._effect("render_block", spec)
        logger.debug(
            "Queued %r (%d ms) as %s",
            spec.label, spec.planned_duration_ms, spec.identity,
        )
        self.queue_changed.emit()
        return True

    def start(self) -> bool:
        """Run the queue from the front.  ``False`` if rejected or empty."""
        return bool(self.dispatch(TimerEvent.START))

    def cancel(self, identity: str) -> bool:
        """Stop the active timer or drop a queued one.

        Cancelling the active timer logs it and leaves the engine IDLE
        even when more timers are queued.  ``False`` if nothing matched.
        """
        return bool(self.dispatch(TimerEvent.CANCEL, identity))

    def clear_all(self) -> None:
        """Stop everything and empty the queue.  The run log is kept."""
        self.dispatch(TimerEvent.CLEAR)

    def clear_log(self) -> None:
        self.run_log.clear()
        self.run_log_changed.emit()

    def dispatch(self, event: TimerEvent, payload: Any = None) -> Any:
        """Route *event* through the transition table for the current state."""
        handler_name = _TRANSITIONS.get((self._state, event))
        if handler_name is None:
            logger.debug("Ignoring %s while %s", event.name, self._state.name)
            return None
        return getattr(self, handler_name)(payload)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: transitions
    # ══════════════════════════════════════════════════════════════════

    def _on_start(self, _payload: Any) -> bool:
        if self.queue.is_empty:
            logger.debug("Start requested with an empty queue")
            return False
        self._effect(
            "highlight",
            [self._blocks.get(spec.identity) for spec in self.queue],
        )
        self._begin_next()
        return True

    def _on_start_rejected(self, _payload: Any) -> bool:
        logger.info("Start rejected: %s", ALREADY_RUNNING_MESSAGE)
        self.start_rejected.emit(ALREADY_RUNNING_MESSAGE)
        return False

    def _on_running_tick(self, _payload: Any) -> None:
        handle = self._active
        now = self._clock()
        if handle.is_due(now):
            self.dispatch(TimerEvent.COMPLETE, now)
            return
        self.tick.emit(handle.spec.identity, handle.remaining_ms(now))

    def _on_complete(self, now: datetime) -> RunLogEntry | None:
        handle = self._active
        spec = handle.spec
        handle.token.cancel()
        self._set_state(TimerState.COMPLETING)
        self.tick.emit(spec.identity, 0)

        entry = RunLogEntry.record(spec, handle.started_at, now)

        prefs = self.preferences
        self._effect("play_alert", prefs.alert_level)
        if prefs.notifications_enabled:
            self._effect("notify", spec.label)

        if self._active is not handle:
            # a side effect cleared the engine; nothing left to record
            return None

        self.run_log.append(entry)
        self.run_log_changed.emit()
        logger.info(
            "Completed %r: planned %d ms, actual %d ms",
            spec.label, entry.planned_duration_ms, entry.actual_elapsed_ms,
        )

        self._start_exit(spec.identity)
        self.timer_completed.emit(entry)
        self.dispatch(TimerEvent.ADVANCE)
        return entry

    def _on_advance(self, _payload: Any) -> None:
        self._active = None
        if not self.queue.is_empty:
            self._begin_next()
            return
        self._set_state(TimerState.IDLE)
        logger.info("Queue finished")
        self.queue_finished.emit()

    def _on_cancel(self, identity: str) -> bool:
        handle = self._active
        if handle.spec.identity != identity:
            return self._on_remove_queued(identity)

        now = self._clock()
        handle.token.cancel()
        entry = RunLogEntry.record(handle.spec, handle.started_at, now)
        self.run_log.append(entry)
        self._active = None
        self._effect("remove_block", self._blocks.pop(identity, None))
        self._set_state(TimerState.IDLE)

        logger.info(
            "Cancelled %r after %d of %d ms",
            handle.spec.label, entry.actual_elapsed_ms, entry.planned_duration_ms,
        )
        self.run_log_changed.emit()
        self.timer_cancelled.emit(entry)
        return True

    def _on_remove_queued(self, identity: str) -> bool:
        if not self.queue.remove_by_identity(identity):
            logger.debug("No queued or active timer %s", identity)
            return False
        self._effect("remove_block", self._blocks.pop(identity, None))
        self.queue_changed.emit()
        return True

    def _on_clear(self, _payload: Any) -> None:
        if self._active is not None:
            self._active.token.cancel()
            self._active = None
        for token in list(self._exits):
            token.cancel()
        self._exits.clear()

        self.queue.clear()
        for block in self._blocks.values():
            self._effect("remove_block", block)
        self._blocks.clear()

        logger.info("Cleared all timers")
        self._set_state(TimerState.IDLE)
        self.queue_changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _begin_next(self) -> None:
        spec = self.queue.dequeue_front()
        handle = ActiveTimerHandle(spec=spec, started_at=self._clock())
        self._active = handle

        qt_timer = QTimer(self)
        qt_timer.setInterval(self._tick_interval_ms)
        qt_timer.timeout.connect(self._on_tick)
        handle.token.add_callback(qt_timer.stop)
        handle.token.add_callback(qt_timer.deleteLater)

        progress = self._effect(
            "animate_progress",
            self._blocks.get(spec.identity),
            spec.planned_duration_ms,
        )
        if progress is not None:
            handle.token.add_callback(progress.stop)

        self._set_state(TimerState.RUNNING)
        self.queue_changed.emit()
        qt_timer.start()

        logger.info("Started %r (%d ms)", spec.label, spec.planned_duration_ms)
        self.timer_started.emit(spec)
        self.tick.emit(spec.identity, spec.planned_duration_ms)

    def _on_tick(self) -> None:
        self.dispatch(TimerEvent.TICK)

    def _start_exit(self, identity: str) -> None:
        """Kick off the exit animation; the block goes once it finishes."""
        block = self._blocks.pop(identity, None)
        token = CancellationToken()
        self._exits.append(token)

        animation = self._effect("animate_exit", block, token.cancel)
        if animation is not None:
            token.add_callback(animation.stop)
        token.add_callback(partial(self._effect, "remove_block", block))
        token.add_callback(partial(self._discard_exit, token))
        if animation is None:
            token.cancel()

    def _discard_exit(self, token: CancellationToken) -> None:
        if token in self._exits:
            self._exits.remove(token)

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)

    def _effect(self, name: str, *args: Any) -> Any:
        """Call a side-effect hook; failures are logged, never raised."""
        try:
            return getattr(self._effects, name)(*args)
        except Exception:
            logger.exception("Timer side effect %s failed", name)
            return None
