"""UI package."""

from .animations import Animator, MinimalAnimator, RichAnimator, create_animator
from .run_log_view import RunLogWidget
from .timer_block import TimerBlock

__all__ = [
    "Animator",
    "MinimalAnimator",
    "RichAnimator",
    "create_animator",
    "RunLogWidget",
    "TimerBlock",
]
