"""Progress and exit animations for timer blocks.

Two interchangeable implementations sit behind ``Animator``:

- ``RichAnimator`` drives the progress bar with a ``QPropertyAnimation``
  and fades finished blocks out through a ``QGraphicsOpacityEffect``.
- ``MinimalAnimator`` steps the progress bar from a plain ``QTimer`` and
  simply hides finished blocks.

``create_animator()`` picks one once at startup; callers only ever see
the ``Animator`` interface.  Every method returns an object with a
``stop()`` method so the timer engine can abort it.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import QElapsedTimer, QEasingCurve, QObject, QPropertyAnimation, QTimer
from PyQt6.QtWidgets import QGraphicsOpacityEffect

from .timer_block import PROGRESS_STEPS, TimerBlock

EXIT_ANIMATION_MS = 500
MINIMAL_STEP_MS = 250


class Animator:
    """Interface.  Subclasses must implement both methods."""

    name = "none"

    def __init__(self, exit_ms: int = EXIT_ANIMATION_MS) -> None:
        self.exit_ms = exit_ms

    def animate_progress(self, block: TimerBlock, duration_ms: int):
        raise NotImplementedError

    def animate_exit(self, block: TimerBlock, on_finished: Callable[[], None]):
        raise NotImplementedError


class RichAnimator(Animator):
    name = "rich"

    def animate_progress(self, block: TimerBlock, duration_ms: int) -> QPropertyAnimation:
        anim = QPropertyAnimation(block.progress_bar, b"value", block)
        anim.setDuration(duration_ms)
        anim.setStartValue(0)
        anim.setEndValue(PROGRESS_STEPS)
        anim.setEasingCurve(QEasingCurve.Type.Linear)
        anim.start()
        return anim

    def animate_exit(
        self, block: TimerBlock, on_finished: Callable[[], None],
    ) -> QPropertyAnimation:
        opacity = QGraphicsOpacityEffect(block)
        opacity.setOpacity(1.0)
        block.setGraphicsEffect(opacity)

        anim = QPropertyAnimation(opacity, b"opacity", block)
        anim.setDuration(self.exit_ms)
        anim.setStartValue(1.0)
        anim.setEndValue(0.0)
        anim.setEasingCurve(QEasingCurve.Type.InCubic)
        anim.finished.connect(on_finished)
        anim.start()
        return anim


class _SteppedProgress(QObject):
    """Moves a block's progress bar in coarse steps."""

    def __init__(self, block: TimerBlock, duration_ms: int) -> None:
        super().__init__(block)
        self._block = block
        self._duration_ms = duration_ms
        self._clock = QElapsedTimer()
        self._timer = QTimer(self)
        self._timer.setInterval(MINIMAL_STEP_MS)
        self._timer.timeout.connect(self._step)

    def start(self) -> None:
        self._clock.start()
        self._block.set_progress(0.0)
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _step(self) -> None:
        fraction = self._clock.elapsed() / self._duration_ms
        self._block.set_progress(fraction)
        if fraction >= 1.0:
            self._timer.stop()


class MinimalAnimator(Animator):
    name = "minimal"

    def animate_progress(self, block: TimerBlock, duration_ms: int) -> _SteppedProgress:
        stepper = _SteppedProgress(block, duration_ms)
        stepper.start()
        return stepper

    def animate_exit(
        self, block: TimerBlock, on_finished: Callable[[], None],
    ) -> QTimer:
        block.hide()
        timer = QTimer(block)
        timer.setSingleShot(True)
        timer.setInterval(self.exit_ms)
        timer.timeout.connect(on_finished)
        timer.start()
        return timer


def create_animator(rich: bool = True, exit_ms: int = EXIT_ANIMATION_MS) -> Animator:
    cls = RichAnimator if rich else MinimalAnimator
    return cls(exit_ms=exit_ms)
