"""
Gesture classification.

Turns one drag event snapshot into a discrete Intent. The classifier is a
pure function: it reads the event and the thresholds and never touches
counter state. Applying the Intent is CounterStore.apply_intent's job.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from models.config import GestureConfig
from models.gesture import (
    DIRECTION_DECREMENT,
    DIRECTION_INCREMENT,
    DragEvent,
    Intent,
    NO_INTENT,
)
from .steps import StepCalculator


ExclusionPredicate = Callable[[DragEvent], bool]

AXIS_HORIZONTAL = "horizontal"
AXIS_VERTICAL = "vertical"

_DEFAULT_CONFIG = GestureConfig()
_DEFAULT_STEPS = StepCalculator()


def coerce_event(event: Union[DragEvent, Mapping[str, Any], Any]) -> Optional[DragEvent]:
    """Return a DragEvent, or None if the snapshot is malformed."""
    if isinstance(event, DragEvent):
        if not event.is_finite:
            logging.debug(f"Ignoring drag event with non-finite values: {event}")
            return None
        return event
    try:
        return DragEvent.from_dict(dict(event))
    except (TypeError, ValueError, OverflowError) as e:
        logging.debug(f"Ignoring malformed drag event: {e}")
        return None


def dominant_axis(event: DragEvent) -> str:
    """Horizontal if |dx| > |dy|, otherwise vertical (ties go vertical)."""
    return AXIS_HORIZONTAL if abs(event.dx) > abs(event.dy) else AXIS_VERTICAL


def is_suppressed(
    event: DragEvent,
    is_excluded: Optional[ExclusionPredicate] = None,
    modal_open: bool = False,
) -> bool:
    """
    Check whether gestures must be ignored for this event.

    True when an edit/settings modal is open or the gesture started over an
    excluded interactive region (flagged on the event or by the predicate).
    """
    if modal_open or event.target_excluded:
        return True
    if is_excluded is None:
        return False
    try:
        return bool(is_excluded(event))
    except Exception as e:
        logging.warning(f"Exclusion predicate failed, suppressing gesture: {e}")
        return True


def _classify_horizontal(event: DragEvent, config: GestureConfig) -> Intent:
    if not event.last:
        return NO_INTENT
    if abs(event.dx) <= config.switch_distance or abs(event.vx) <= config.switch_velocity:
        return NO_INTENT
    # Swipe right reveals the previous counter, swipe left the next one
    return Intent.switch_prev() if event.dx > 0 else Intent.switch_next()


def _classify_vertical(event: DragEvent, config: GestureConfig, steps: StepCalculator) -> Intent:
    dy = event.dy
    if event.last:
        if abs(dy) <= config.swipe_threshold:
            return NO_INTENT
        n = steps(dy)
        # Screen y grows downward: swipe down decrements, swipe up increments
        return Intent.decrement(n) if dy > 0 else Intent.increment(n)

    if event.active and abs(dy) > config.hint_threshold:
        direction = DIRECTION_DECREMENT if dy > 0 else DIRECTION_INCREMENT
        return Intent.feedback_hint(direction, steps(dy))

    return NO_INTENT


def classify(
    event: Union[DragEvent, Mapping[str, Any]],
    config: Optional[GestureConfig] = None,
    step_calculator: Optional[StepCalculator] = None,
    is_excluded: Optional[ExclusionPredicate] = None,
    modal_open: bool = False,
) -> Intent:
    """
    Classify one drag event into an Intent.

    Decision order:
    1. Suppressed (modal open or excluded region) -> NONE
    2. Tap -> INCREMENT(1)
    3. Horizontal-dominant, final event, far and fast enough -> SWITCH_PREV/NEXT
    4. Vertical-dominant, final event beyond swipe threshold -> INCREMENT/DECREMENT(steps)
       Vertical-dominant, still active beyond hint threshold -> FEEDBACK_HINT
    5. Anything else -> NONE

    Never raises: malformed snapshots classify as NONE.

    Args:
        event: DragEvent or a raw mapping with the same fields.
        config: Thresholds (defaults match the stock gesture config).
        step_calculator: Distance-to-steps mapping.
        is_excluded: Optional predicate marking events over excluded regions.
        modal_open: Whether an edit/settings modal is currently open.
    """
    drag = coerce_event(event)
    if drag is None:
        return NO_INTENT

    cfg = config or _DEFAULT_CONFIG
    steps = step_calculator or _DEFAULT_STEPS

    if is_suppressed(drag, is_excluded, modal_open):
        return NO_INTENT

    if drag.tap:
        return Intent.increment(1)

    if dominant_axis(drag) == AXIS_HORIZONTAL:
        return _classify_horizontal(drag, cfg)
    return _classify_vertical(drag, cfg, steps)
