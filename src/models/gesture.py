"""
Gesture models: drag event snapshots and the intents derived from them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


DIRECTION_INCREMENT = "increment"
DIRECTION_DECREMENT = "decrement"

# camelCase names accepted from pointer-event producers
_FIELD_ALIASES = {
    "isTap": "tap",
    "targetHitsExcludedRegion": "target_excluded",
    "targetExcluded": "target_excluded",
}


def _vector(value: Any, name: str) -> Tuple[float, float]:
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or len(value) != 2:
        raise ValueError(f"{name} must be a pair of numbers, got {value!r}")
    x, y = value
    for component in (x, y):
        if isinstance(component, bool) or not isinstance(component, (int, float)):
            raise ValueError(f"{name} components must be numbers, got {value!r}")
    try:
        fx, fy = float(x), float(y)
    except OverflowError as e:
        raise ValueError(f"{name} components are out of range: {e}") from e
    if not (math.isfinite(fx) and math.isfinite(fy)):
        raise ValueError(f"{name} components must be finite, got {value!r}")
    return fx, fy


def _flag(d: Dict[str, Any], key: str, required: bool) -> bool:
    if key not in d:
        if required:
            raise ValueError(f"missing field: {key}")
        return False
    value = d[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class DragEvent:
    """
    Per-event snapshot of a single-pointer drag gesture.

    Attributes:
        movement: (dx, dy) since the gesture started.
        velocity: (vx, vy) in units per millisecond.
        active: Pointer is still down.
        last: Final event of the gesture.
        first: First event of the gesture.
        tap: Gesture qualifies as a tap (tiny movement, short duration).
        target_excluded: Gesture started over an excluded interactive region.
    """
    movement: Tuple[float, float] = (0.0, 0.0)
    velocity: Tuple[float, float] = (0.0, 0.0)
    active: bool = False
    last: bool = False
    first: bool = False
    tap: bool = False
    target_excluded: bool = False

    @property
    def dx(self) -> float:
        return self.movement[0]

    @property
    def dy(self) -> float:
        return self.movement[1]

    @property
    def vx(self) -> float:
        return self.velocity[0]

    @property
    def vy(self) -> float:
        return self.velocity[1]

    @property
    def is_finite(self) -> bool:
        """False if any movement/velocity component is NaN or infinite."""
        try:
            return all(math.isfinite(c) for c in (*self.movement, *self.velocity))
        except (TypeError, ValueError, OverflowError):
            return False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DragEvent":
        """
        Adapter: Create from a raw event mapping (e.g. JSON from a client).

        Raises:
            ValueError: If required fields are missing or ill-typed.
        """
        if not isinstance(d, dict):
            raise ValueError(f"event must be an object, got {type(d).__name__}")
        d = {_FIELD_ALIASES.get(k, k): v for k, v in d.items()}
        if "movement" not in d:
            raise ValueError("missing field: movement")
        if "velocity" not in d:
            raise ValueError("missing field: velocity")

        return cls(
            movement=_vector(d["movement"], "movement"),
            velocity=_vector(d["velocity"], "velocity"),
            active=_flag(d, "active", required=True),
            last=_flag(d, "last", required=True),
            first=_flag(d, "first", required=False),
            tap=_flag(d, "tap", required=True),
            target_excluded=_flag(d, "target_excluded", required=False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movement": list(self.movement),
            "velocity": list(self.velocity),
            "active": self.active,
            "last": self.last,
            "first": self.first,
            "tap": self.tap,
            "target_excluded": self.target_excluded,
        }


class IntentKind(str, Enum):
    """Discrete actions a gesture can resolve to."""

    NONE = "none"
    INCREMENT = "increment"
    DECREMENT = "decrement"
    SWITCH_PREV = "switch_prev"
    SWITCH_NEXT = "switch_next"
    FEEDBACK_HINT = "feedback_hint"


@dataclass(frozen=True)
class Intent:
    """
    A discrete action derived from continuous gesture input.

    `amount` is the step count for INCREMENT/DECREMENT and the advisory
    magnitude for FEEDBACK_HINT. `direction` is only set for FEEDBACK_HINT.
    """
    kind: IntentKind = IntentKind.NONE
    amount: int = 0
    direction: Optional[str] = None

    @classmethod
    def none(cls) -> "Intent":
        return NO_INTENT

    @classmethod
    def increment(cls, amount: int) -> "Intent":
        return cls(IntentKind.INCREMENT, amount=amount)

    @classmethod
    def decrement(cls, amount: int) -> "Intent":
        return cls(IntentKind.DECREMENT, amount=amount)

    @classmethod
    def switch_prev(cls) -> "Intent":
        return cls(IntentKind.SWITCH_PREV)

    @classmethod
    def switch_next(cls) -> "Intent":
        return cls(IntentKind.SWITCH_NEXT)

    @classmethod
    def feedback_hint(cls, direction: str, magnitude: int) -> "Intent":
        return cls(IntentKind.FEEDBACK_HINT, amount=magnitude, direction=direction)

    @property
    def is_none(self) -> bool:
        return self.kind is IntentKind.NONE

    @property
    def is_count_change(self) -> bool:
        return self.kind in (IntentKind.INCREMENT, IntentKind.DECREMENT)

    @property
    def is_switch(self) -> bool:
        return self.kind in (IntentKind.SWITCH_PREV, IntentKind.SWITCH_NEXT)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"kind": self.kind.value, "amount": self.amount}
        if self.direction is not None:
            d["direction"] = self.direction
        return d


NO_INTENT = Intent()
