"""Timer package."""

from .context import RunContext
from .duration import format_duration
from .effects import TimerEffects
from .engine import (
    TimerEngine,
    TimerState,
    TimerEvent,
    TICK_INTERVAL_MS,
    ALREADY_RUNNING_MESSAGE,
)
from .models import ActiveTimerHandle, CancellationToken, RunLogEntry, TimerSpec
from .queue import TimerQueue
from .run_log import RunLog, export_run_log, log_filename, parse_run_log

__all__ = [
    "RunContext",
    "format_duration",
    "TimerEffects",
    "TimerEngine",
    "TimerState",
    "TimerEvent",
    "TICK_INTERVAL_MS",
    "ALREADY_RUNNING_MESSAGE",
    "ActiveTimerHandle",
    "CancellationToken",
    "RunLogEntry",
    "TimerSpec",
    "TimerQueue",
    "RunLog",
    "export_run_log",
    "log_filename",
    "parse_run_log",
]
