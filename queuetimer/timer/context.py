"""Per-session state handed to a ``TimerEngine``."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..preferences import PreferenceStore
from .queue import TimerQueue
from .run_log import RunLog


@dataclass
class RunContext:
    """Everything one run session owns.  Engines never share contexts."""

    queue: TimerQueue = field(default_factory=TimerQueue)
    run_log: RunLog = field(default_factory=RunLog)
    preferences: PreferenceStore = field(default_factory=PreferenceStore)
