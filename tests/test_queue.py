"""Tests for TimerSpec and the pending TimerQueue."""

import pytest

from queuetimer.timer.models import DEFAULT_LABEL, TimerSpec
from queuetimer.timer.queue import TimerQueue


def _spec(label="t", ms=1_000):
    return TimerSpec(label=label, planned_duration_ms=ms)


# ═══════════════════════════════════════════════════════════════════════════
#  TIMER SPEC
# ═══════════════════════════════════════════════════════════════════════════


class TestTimerSpec:

    def test_identity_is_unique(self):
        a = _spec("same", 60_000)
        b = _spec("same", 60_000)
        assert a.identity != b.identity
        assert a != b

    def test_empty_label_gets_default(self):
        assert _spec("").label == DEFAULT_LABEL

    @pytest.mark.parametrize("ms", [0, -1, -60_000])
    def test_non_positive_duration_rejected(self, ms):
        with pytest.raises(ValueError):
            _spec(ms=ms)

    def test_from_minutes(self):
        spec = TimerSpec.from_minutes(5, "5 Min Focus")
        assert spec.planned_duration_ms == 300_000
        assert spec.label == "5 Min Focus"

    def test_is_frozen(self):
        spec = _spec()
        with pytest.raises(AttributeError):
            spec.label = "other"


# ═══════════════════════════════════════════════════════════════════════════
#  QUEUE
# ═══════════════════════════════════════════════════════════════════════════


class TestTimerQueue:

    def test_starts_empty(self):
        q = TimerQueue()
        assert q.is_empty
        assert len(q) == 0
        assert q.dequeue_front() is None

    def test_fifo_order(self):
        q = TimerQueue()
        specs = [_spec(label) for label in "ABC"]
        for s in specs:
            q.enqueue(s)
        assert [q.dequeue_front() for _ in range(3)] == specs
        assert q.is_empty

    def test_remove_by_identity_from_middle(self):
        q = TimerQueue()
        a, b, c = _spec("A"), _spec("B"), _spec("C")
        for s in (a, b, c):
            q.enqueue(s)
        assert q.remove_by_identity(b.identity) is True
        assert q.pending == (a, c)

    def test_remove_missing_returns_false(self):
        q = TimerQueue()
        q.enqueue(_spec())
        assert q.remove_by_identity("missing") is False
        assert len(q) == 1

    def test_remove_only_matching_duplicate(self):
        q = TimerQueue()
        first, second = _spec("dup"), _spec("dup")
        q.enqueue(first)
        q.enqueue(second)
        q.remove_by_identity(second.identity)
        assert q.pending == (first,)

    def test_contains(self):
        q = TimerQueue()
        s = _spec()
        q.enqueue(s)
        assert q.contains(s.identity)
        assert not q.contains("nope")

    def test_iteration_is_a_snapshot(self):
        q = TimerQueue()
        a, b = _spec("A"), _spec("B")
        q.enqueue(a)
        q.enqueue(b)
        seen = []
        for s in q:
            seen.append(s)
            q.remove_by_identity(s.identity)
        assert seen == [a, b]
        assert q.is_empty

    def test_clear(self):
        q = TimerQueue()
        q.enqueue(_spec())
        q.enqueue(_spec())
        q.clear()
        assert q.is_empty

    def test_pending_is_read_only_copy(self):
        q = TimerQueue()
        q.enqueue(_spec())
        pending = q.pending
        q.clear()
        assert len(pending) == 1
