"""Side effects the timer engine triggers but does not own.

The engine only talks to this interface.  The default implementation
does nothing, which is what headless engines and most tests use; the
main window supplies one that draws blocks, plays sounds and posts
notifications.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from .models import TimerSpec


class Cancellable(Protocol):
    def stop(self) -> None: ...


class TimerEffects:
    """No-op base.  Override the hooks you need."""

    # ── visuals ───────────────────────────────────────────────────────

    def render_block(self, spec: TimerSpec) -> Any:
        """Create the visual for a newly queued spec; return its handle."""
        return spec.identity

    def remove_block(self, handle: Any) -> None:
        pass

    def highlight(self, handles: Sequence[Any]) -> None:
        pass

    def animate_progress(self, handle: Any, duration_ms: int) -> Cancellable | None:
        return None

    def animate_exit(
        self, handle: Any, on_finished: Callable[[], None],
    ) -> Cancellable | None:
        """Play the completion animation, then call *on_finished*.

        The default has nothing to animate and finishes immediately.
        """
        on_finished()
        return None

    # ── signalling ────────────────────────────────────────────────────

    def play_alert(self, level: str) -> None:
        pass

    def notify(self, label: str) -> None:
        pass
