"""
Transient gesture feedback with generation-tagged auto-clear.

Every activation bumps a generation token. The scheduled clear carries the
token it was created with and only clears feedback if that token is still
current, so a timer left over from an earlier gesture can never erase the
feedback of a newer one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional


# scheduler(delay_seconds, callback) -> handle with .cancel()
Scheduler = Callable[[float, Callable[[], None]], Any]


def thread_timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Default scheduler backed by a daemon threading.Timer."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


@dataclass(frozen=True)
class Feedback:
    """
    Advisory display signal.

    Attributes:
        direction: "increment" or "decrement".
        magnitude: Step count the gesture maps to (advisory only).
        generation: Token of the activation that produced this feedback.
        committed: True when it reflects an applied change, False for a hint.
    """
    direction: str
    magnitude: int
    generation: int
    committed: bool = False

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "magnitude": self.magnitude,
            "generation": self.generation,
            "committed": self.committed,
        }


class FeedbackController:
    """Holds the current feedback and clears it after `clear_after` seconds."""

    def __init__(self, clear_after: float = 0.3, scheduler: Optional[Scheduler] = None):
        self._clear_after = clear_after
        self._scheduler = scheduler or thread_timer_scheduler
        self._lock = threading.Lock()
        self._generation = 0
        self._current: Optional[Feedback] = None
        self._pending: Any = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def current(self) -> Optional[Feedback]:
        with self._lock:
            return self._current

    def begin_gesture(self) -> int:
        """Start a new gesture: drop old feedback, invalidate its timer, return the new token."""
        self.clear()
        return self.generation

    def show(self, direction: str, magnitude: int, committed: bool = False) -> int:
        """
        Display feedback and schedule its auto-clear.

        Returns:
            The generation token of this activation.
        """
        with self._lock:
            self._generation += 1
            token = self._generation
            self._current = Feedback(
                direction=direction,
                magnitude=magnitude,
                generation=token,
                committed=committed,
            )
            previous = self._pending
            self._pending = None

        if previous is not None:
            self._cancel(previous)

        handle = self._scheduler(self._clear_after, lambda: self.clear_if_current(token))
        with self._lock:
            # A newer show() may have raced in while scheduling
            if self._generation == token:
                self._pending = handle
                handle = None
        if handle is not None:
            self._cancel(handle)
        return token

    def clear_if_current(self, token: int) -> bool:
        """Timer callback: clear only if no newer activation happened."""
        with self._lock:
            if token != self._generation:
                logging.debug(f"Stale feedback timer {token} ignored (current={self._generation})")
                return False
            self._current = None
            self._pending = None
            return True

    def clear(self) -> None:
        """Clear immediately and cancel any pending timer."""
        with self._lock:
            self._generation += 1
            self._current = None
            pending = self._pending
            self._pending = None
        if pending is not None:
            self._cancel(pending)

    @staticmethod
    def _cancel(handle: Any) -> None:
        cancel = getattr(handle, "cancel", None)
        if cancel is not None:
            cancel()
