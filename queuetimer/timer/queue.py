"""FIFO of timers waiting to run."""

from __future__ import annotations

from collections.abc import Iterator

from .models import TimerSpec


class TimerQueue:
    """Pending ``TimerSpec``s in the order they were added.

    The queue only knows about its own contents: it never touches the
    run log or whichever timer is currently active.
    """

    def __init__(self) -> None:
        self._items: list[TimerSpec] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TimerSpec]:
        return iter(tuple(self._items))

    @property
    def pending(self) -> tuple[TimerSpec, ...]:
        return tuple(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def contains(self, identity: str) -> bool:
        return any(s.identity == identity for s in self._items)

    def enqueue(self, spec: TimerSpec) -> None:
        self._items.append(spec)

    def dequeue_front(self) -> TimerSpec | None:
        """Remove and return the head, or ``None`` when empty."""
        if not self._items:
            return None
        return self._items.pop(0)

    def remove_by_identity(self, identity: str) -> bool:
        """Drop the spec with *identity*.  ``False`` if it isn't queued."""
        for idx, spec in enumerate(self._items):
            if spec.identity == identity:
                del self._items[idx]
                return True
        return False

    def clear(self) -> None:
        self._items.clear()
