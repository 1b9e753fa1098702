"""
In-process application state: the counter collection and transient feedback.
"""

from .store import CounterStore, clamp
from .feedback import Feedback, FeedbackController, thread_timer_scheduler

__all__ = [
    "CounterStore",
    "clamp",
    "Feedback",
    "FeedbackController",
    "thread_timer_scheduler",
]
