"""Shared test helpers for QueueTimer."""

from datetime import datetime, timedelta, timezone

from queuetimer.timer.effects import TimerEffects
from queuetimer.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 20, 14, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, ms: int = 0, seconds: float = 0) -> None:
        self.now += timedelta(milliseconds=ms, seconds=seconds)


class _Stoppable:
    def __init__(self, name: str):
        self.name = name
        self.stopped = False

    def stop(self):
        self.stopped = True


class RecordingEffects(TimerEffects):
    """Records every hook call.  Exit animations stay pending until
    ``finish_exits()`` is called."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.progress: list[_Stoppable] = []
        self.exits: list[tuple[_Stoppable, object]] = []
        self.fail: set[str] = set()

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise RuntimeError(f"{name} exploded")

    def named(self, name):
        return [c[1:] for c in self.calls if c[0] == name]

    def render_block(self, spec):
        self._record("render_block", spec)
        return f"block-{spec.identity}"

    def remove_block(self, handle):
        self._record("remove_block", handle)

    def highlight(self, handles):
        self._record("highlight", list(handles))

    def animate_progress(self, handle, duration_ms):
        self._record("animate_progress", handle, duration_ms)
        anim = _Stoppable(f"progress:{handle}")
        self.progress.append(anim)
        return anim

    def animate_exit(self, handle, on_finished):
        self._record("animate_exit", handle)
        anim = _Stoppable(f"exit:{handle}")
        self.exits.append((anim, on_finished))
        return anim

    def finish_exits(self):
        pending, self.exits = self.exits, []
        for anim, on_finished in pending:
            if not anim.stopped:
                on_finished()

    def play_alert(self, level):
        self._record("play_alert", level)

    def notify(self, label):
        self._record("notify", label)


def complete_active(engine: TimerEngine, clock: FakeClock, overshoot_ms: int = 0) -> None:
    """Jump the clock past the active timer's deadline and tick once."""
    handle = engine.active
    remaining = handle.spec.planned_duration_ms - (
        (clock.now - handle.started_at).total_seconds() * 1000
    )
    clock.advance(ms=max(0, remaining) + overshoot_ms)
    engine._on_tick()
