"""
Counter model for the counter collection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


DEFAULT_TARGET_VALUE = 100


def _require_int(d: Dict[str, Any], key: str) -> int:
    value = d.get(key)
    # bool is an int subclass; a snapshot with `true` as a count is malformed
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"counter.{key} must be an integer, got {value!r}")
    return value


def _optional_str(d: Dict[str, Any], key: str) -> Optional[str]:
    value = d.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"counter.{key} must be a string, got {value!r}")
    return value


@dataclass
class Counter:
    """
    A bounded counter.

    Attributes:
        id: Opaque unique token.
        count: Current value, 0 <= count <= target_value at rest.
        target_value: Upper bound, always > 0.
        name: Optional display name.
        color: Optional display color (any CSS-like string).
    """
    id: str
    count: int = 0
    target_value: int = DEFAULT_TARGET_VALUE
    name: Optional[str] = None
    color: Optional[str] = None

    @property
    def progress(self) -> float:
        """Display ratio count / target_value clamped to [0, 1]."""
        if self.target_value <= 0:
            return 0.0
        return min(max(self.count / self.target_value, 0.0), 1.0)

    @property
    def at_target(self) -> bool:
        return self.count >= self.target_value

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Counter":
        """
        Adapter: Create from a snapshot entry.

        Raises:
            ValueError: If the entry does not have the snapshot shape.
        """
        if not isinstance(d, dict):
            raise ValueError(f"counter entry must be an object, got {type(d).__name__}")

        counter_id = d.get("id")
        if not isinstance(counter_id, str) or not counter_id:
            raise ValueError(f"counter.id must be a non-empty string, got {counter_id!r}")

        count = _require_int(d, "count")
        target_value = _require_int(d, "targetValue")
        if count < 0:
            raise ValueError(f"counter.count must be >= 0, got {count}")
        if target_value <= 0:
            raise ValueError(f"counter.targetValue must be > 0, got {target_value}")

        return cls(
            id=counter_id,
            count=count,
            target_value=target_value,
            name=_optional_str(d, "name"),
            color=_optional_str(d, "color"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted snapshot entry (camelCase keys)."""
        d: Dict[str, Any] = {
            "id": self.id,
            "count": self.count,
            "targetValue": self.target_value,
        }
        if self.name is not None:
            d["name"] = self.name
        if self.color is not None:
            d["color"] = self.color
        return d
