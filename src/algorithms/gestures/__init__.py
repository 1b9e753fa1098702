"""
Gesture interpretation for bounded counters.

This module turns single-pointer drag motion into discrete Intents.
The classifier is pure - it never mutates counter state; the store applies
Intents separately.

Available pieces:
- calculate_steps / StepCalculator: swipe distance -> step count
- classify: one drag event -> Intent
- PointerTracker: raw pointer samples -> drag events
- GestureSession: per-gesture suppression and tap latching around classify
"""

from .steps import StepCalculator, calculate_steps
from .classifier import AXIS_HORIZONTAL, AXIS_VERTICAL, classify, dominant_axis, is_suppressed
from .session import GestureSession, PointerTracker

__all__ = [
    "StepCalculator",
    "calculate_steps",
    "AXIS_HORIZONTAL",
    "AXIS_VERTICAL",
    "classify",
    "dominant_axis",
    "is_suppressed",
    "GestureSession",
    "PointerTracker",
]
