"""Value types shared by the queue, the run log and the engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable
from uuid import uuid4

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "Custom Timer"

_ONE_MS = timedelta(milliseconds=1)


def elapsed_ms(started_at: datetime, ended_at: datetime) -> int:
    """Whole milliseconds between two timestamps (floored)."""
    return (ended_at - started_at) // _ONE_MS


def _new_identity() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class TimerSpec:
    """A planned countdown waiting in the queue.

    ``identity`` is issued once at creation and is the only key used for
    lookups; two specs with the same label and duration are still distinct.
    """

    label: str
    planned_duration_ms: int
    identity: str = field(default_factory=_new_identity)

    def __post_init__(self) -> None:
        if self.planned_duration_ms <= 0:
            raise ValueError(
                f"planned_duration_ms must be positive, "
                f"got {self.planned_duration_ms}"
            )
        if not self.label:
            object.__setattr__(self, "label", DEFAULT_LABEL)

    @classmethod
    def from_minutes(cls, minutes: int, label: str = "") -> TimerSpec:
        return cls(label=label, planned_duration_ms=minutes * 60_000)


@dataclass(frozen=True)
class RunLogEntry:
    """What one timer actually did, compared with what was planned."""

    label: str
    planned_duration_ms: int
    started_at: datetime
    ended_at: datetime
    actual_elapsed_ms: int

    @classmethod
    def record(
        cls, spec: TimerSpec, started_at: datetime, ended_at: datetime,
    ) -> RunLogEntry:
        return cls(
            label=spec.label,
            planned_duration_ms=spec.planned_duration_ms,
            started_at=started_at,
            ended_at=ended_at,
            actual_elapsed_ms=elapsed_ms(started_at, ended_at),
        )

    @property
    def ran_to_plan(self) -> bool:
        return self.actual_elapsed_ms >= self.planned_duration_ms


class CancellationToken:
    """Collects stop callbacks for a countdown and its in-flight effects.

    ``cancel()`` runs every registered callback once.  Callbacks added
    after cancellation run immediately.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            self._run(callback)
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            self._run(callback)

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Cancellation callback %r failed", callback)


@dataclass
class ActiveTimerHandle:
    """Runtime state of the one timer currently counting down."""

    spec: TimerSpec
    started_at: datetime
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def deadline(self) -> datetime:
        return self.started_at + timedelta(
            milliseconds=self.spec.planned_duration_ms,
        )

    def remaining_ms(self, now: datetime) -> int:
        return max(
            0, self.spec.planned_duration_ms - elapsed_ms(self.started_at, now),
        )

    def is_due(self, now: datetime) -> bool:
        return elapsed_ms(self.started_at, now) >= self.spec.planned_duration_ms
