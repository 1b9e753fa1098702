"""
Per-gesture state around the pure classifier.

PointerTracker turns raw pointer samples (down/move/up) into DragEvent
snapshots. GestureSession feeds those snapshots to classify() and remembers,
for the lifetime of one gesture, whether it was suppressed or already
consumed by a tap.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from models.config import GestureConfig
from models.gesture import DragEvent, Intent, NO_INTENT
from .classifier import ExclusionPredicate, coerce_event, classify, is_suppressed
from .steps import StepCalculator


PHASE_DOWN = "down"
PHASE_MOVE = "move"
PHASE_UP = "up"
PHASE_CANCEL = "cancel"


def _finite_sample(x: float, y: float, t: float) -> bool:
    try:
        ok = all(math.isfinite(v) for v in (x, y, t))
    except (TypeError, OverflowError):
        ok = False
    if not ok:
        logging.debug(f"Ignoring non-finite pointer sample ({x!r}, {y!r}, {t!r})")
    return ok


@dataclass
class _PointerState:
    """Internal state for one pointer-down..pointer-up sequence."""
    start_x: float
    start_y: float
    start_t: float
    last_x: float
    last_y: float
    last_t: float
    vx: float = 0.0
    vy: float = 0.0
    excluded: bool = False


class PointerTracker:
    """
    Builds DragEvent snapshots from raw single-pointer samples.

    Timestamps are in milliseconds; velocity is reported in units per
    millisecond, measured between the two most recent samples. Samples
    arriving without a preceding `down`, and samples with NaN or infinite
    coordinates, are ignored.
    """

    def __init__(self, config: Optional[GestureConfig] = None):
        self._config = config or GestureConfig()
        self._state: Optional[_PointerState] = None

    @property
    def in_progress(self) -> bool:
        return self._state is not None

    def down(self, x: float, y: float, t: float, excluded: bool = False) -> Optional[DragEvent]:
        if not _finite_sample(x, y, t):
            return None
        if self._state is not None:
            logging.debug("Pointer down while a gesture is open; restarting gesture")
        self._state = _PointerState(
            start_x=x, start_y=y, start_t=t,
            last_x=x, last_y=y, last_t=t,
            excluded=excluded,
        )
        return DragEvent(
            movement=(0.0, 0.0),
            velocity=(0.0, 0.0),
            active=True,
            last=False,
            first=True,
            tap=False,
            target_excluded=excluded,
        )

    def move(self, x: float, y: float, t: float) -> Optional[DragEvent]:
        st = self._state
        if st is None or not _finite_sample(x, y, t):
            return None
        self._advance(st, x, y, t)
        return self._snapshot(st, active=True, last=False, tap=False)

    def up(self, x: float, y: float, t: float) -> Optional[DragEvent]:
        st = self._state
        if st is None or not _finite_sample(x, y, t):
            return None
        self._advance(st, x, y, t)
        self._state = None
        return self._snapshot(st, active=False, last=True, tap=self._is_tap(st))

    def cancel(self) -> Optional[DragEvent]:
        """End the gesture where it is without treating it as a tap."""
        st = self._state
        if st is None:
            return None
        self._state = None
        return self._snapshot(st, active=False, last=True, tap=False)

    def handle(
        self,
        phase: str,
        x: float = 0.0,
        y: float = 0.0,
        t: float = 0.0,
        excluded: bool = False,
    ) -> Optional[DragEvent]:
        """Dispatch a sample by phase name (down|move|up|cancel)."""
        if phase == PHASE_DOWN:
            return self.down(x, y, t, excluded=excluded)
        if phase == PHASE_MOVE:
            return self.move(x, y, t)
        if phase == PHASE_UP:
            return self.up(x, y, t)
        if phase == PHASE_CANCEL:
            return self.cancel()
        raise ValueError(f"Unknown pointer phase: {phase!r}")

    def _advance(self, st: _PointerState, x: float, y: float, t: float) -> None:
        dt = t - st.last_t
        # Same-timestamp samples keep the previous velocity
        if dt > 0:
            st.vx = (x - st.last_x) / dt
            st.vy = (y - st.last_y) / dt
        st.last_x, st.last_y, st.last_t = x, y, t

    def _is_tap(self, st: _PointerState) -> bool:
        distance = math.hypot(st.last_x - st.start_x, st.last_y - st.start_y)
        duration = st.last_t - st.start_t
        return distance < self._config.tap_threshold and duration <= self._config.tap_max_duration_ms

    @staticmethod
    def _snapshot(st: _PointerState, active: bool, last: bool, tap: bool) -> DragEvent:
        return DragEvent(
            movement=(st.last_x - st.start_x, st.last_y - st.start_y),
            velocity=(st.vx, st.vy),
            active=active,
            last=last,
            first=False,
            tap=tap,
            target_excluded=st.excluded,
        )


class GestureSession:
    """
    Classifies a stream of drag events, one gesture at a time.

    A gesture starts at an event flagged `first` (or at any event when no
    gesture is open) and ends at an event flagged `last`. Once a gesture is
    suppressed (excluded region, modal open) or has produced its tap
    increment, every later event of that gesture yields NONE.
    """

    def __init__(
        self,
        config: Optional[GestureConfig] = None,
        step_calculator: Optional[StepCalculator] = None,
        is_excluded: Optional[ExclusionPredicate] = None,
        on_gesture_start: Optional[Callable[[int], None]] = None,
    ):
        self._config = config or GestureConfig()
        self._steps = step_calculator or StepCalculator()
        self._is_excluded = is_excluded
        self._on_gesture_start = on_gesture_start
        self._gesture_id = 0
        self._open = False
        self._latched = False

    @property
    def gesture_id(self) -> int:
        """Monotonic id of the current (or most recent) gesture."""
        return self._gesture_id

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def is_latched(self) -> bool:
        return self._latched

    def reset(self) -> None:
        """Drop any open gesture."""
        self._open = False
        self._latched = False

    def process(self, event: Union[DragEvent, Mapping[str, Any]], modal_open: bool = False) -> Intent:
        drag = coerce_event(event)
        if drag is None:
            return NO_INTENT

        if drag.first or not self._open:
            self._start_gesture()

        if self._latched:
            intent = NO_INTENT
        elif is_suppressed(drag, self._is_excluded, modal_open):
            logging.debug(f"Gesture {self._gesture_id} suppressed")
            self._latched = True
            intent = NO_INTENT
        else:
            intent = classify(drag, self._config, self._steps)
            if drag.tap:
                self._latched = True

        if drag.last:
            self._open = False
        return intent

    def _start_gesture(self) -> None:
        self._gesture_id += 1
        self._open = True
        self._latched = False
        if self._on_gesture_start is not None:
            self._on_gesture_start(self._gesture_id)
