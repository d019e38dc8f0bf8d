"""Millisecond → clock-face formatting for timer blocks and the run log."""

from __future__ import annotations

import math


def format_duration(ms: int | float) -> str:
    """Format *ms* as ``H:MM:SS`` when an hour or more, else ``M:SS``.

    Partial seconds round up so a countdown never shows ``0:00`` while
    time is still left::

        format_duration(3_661_000)  # "1:01:01"
        format_duration(125_000)    # "2:05"
        format_duration(1)          # "0:01"
    """
    total_seconds = math.ceil(max(0, ms) / 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
