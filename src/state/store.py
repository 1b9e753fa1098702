"""
Counter collection state machine.

CounterStore owns the ordered counter list and the active index. Intents are
the only gesture-driven transitions; every transition is synchronous and
total. Invalid requests (removing the last counter, unknown ids, out-of-range
indices) are silent no-ops rather than errors.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from models.counter import Counter, DEFAULT_TARGET_VALUE
from models.gesture import Intent, IntentKind


IdFactory = Callable[[], str]
ChangeListener = Callable[["CounterStore"], None]

# Accepted partial-update keys -> Counter attribute
_UPDATE_FIELDS = {
    "count": "count",
    "targetValue": "target_value",
    "target_value": "target_value",
    "name": "name",
    "color": "color",
}


def _new_id() -> str:
    return uuid.uuid4().hex


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class CounterStore:
    """
    Ordered collection of counters plus the active selection.

    Invariants held after every operation:
    - at least one counter
    - 0 <= active_index < len(counters)
    - counter ids are unique

    update_counter() does not clamp count against target_value; callers that
    change counts (apply_intent, the edit service) clamp before committing.

    Listeners registered with add_listener() are called after every change
    to persisted fields. Active-index-only changes do not notify.
    """

    def __init__(
        self,
        counters: Optional[List[Counter]] = None,
        default_target: int = DEFAULT_TARGET_VALUE,
        id_factory: Optional[IdFactory] = None,
    ):
        self._default_target = default_target
        self._id_factory = id_factory or _new_id
        self._counters: List[Counter] = []
        self._active_index = 0
        self._listeners: List[ChangeListener] = []

        seen = set()
        for counter in counters or []:
            if counter.id in seen:
                logging.warning(f"Dropping counter with duplicate id {counter.id!r}")
                continue
            seen.add(counter.id)
            self._counters.append(replace(counter))

        if not self._counters:
            self._counters.append(self._make_counter())

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def counters(self) -> List[Counter]:
        """Copies of the counters in creation order."""
        return [replace(c) for c in self._counters]

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_counter(self) -> Counter:
        return replace(self._counters[self._active_index])

    def __len__(self) -> int:
        return len(self._counters)

    def get_counter(self, counter_id: str) -> Optional[Counter]:
        index = self._index_of(counter_id)
        return replace(self._counters[index]) if index is not None else None

    @property
    def can_remove(self) -> bool:
        """Presentation hint: hide delete when only one counter remains."""
        return len(self._counters) > 1

    @property
    def has_previous(self) -> bool:
        return self._active_index > 0

    @property
    def has_next(self) -> bool:
        return self._active_index < len(self._counters) - 1

    def snapshot(self) -> List[Dict[str, Any]]:
        """Persisted form: ordered list of counter dicts."""
        return [c.to_dict() for c in self._counters]

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def add_counter(self) -> Counter:
        """Append a fresh counter and make it active. Always succeeds."""
        counter = self._make_counter()
        self._counters.append(counter)
        self._active_index = len(self._counters) - 1
        logging.info(f"Added counter {counter.id} (total={len(self._counters)})")
        self._notify()
        return replace(counter)

    def remove_counter(self, counter_id: str) -> bool:
        """
        Remove a counter by id.

        No-op (returns False) when it is the only counter or the id is unknown.
        """
        if len(self._counters) <= 1:
            logging.debug("Refusing to remove the last counter")
            return False
        index = self._index_of(counter_id)
        if index is None:
            return False

        del self._counters[index]
        if self._active_index >= len(self._counters):
            self._active_index = max(0, len(self._counters) - 1)
        logging.info(f"Removed counter {counter_id} (total={len(self._counters)})")
        self._notify()
        return True

    def update_counter(self, counter_id: str, updates: Dict[str, Any]) -> bool:
        """
        Merge partial fields into a counter.

        Recognized keys: count, targetValue (or target_value), name, color.
        Other keys are ignored. Unknown id is a no-op. Does not clamp.

        Returns:
            True if any field changed.
        """
        index = self._index_of(counter_id)
        if index is None:
            return False

        current = self._counters[index]
        changes: Dict[str, Any] = {}
        for key, value in (updates or {}).items():
            attr = _UPDATE_FIELDS.get(key)
            if attr is None:
                logging.debug(f"Ignoring unknown counter field {key!r}")
                continue
            if getattr(current, attr) != value:
                changes[attr] = value

        if not changes:
            return False

        self._counters[index] = replace(current, **changes)
        logging.debug(f"Updated counter {counter_id}: {changes}")
        self._notify()
        return True

    def set_active_counter_index(self, index: int) -> bool:
        """Select a counter by position; out-of-range indices are ignored."""
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < len(self._counters):
            return False
        changed = index != self._active_index
        self._active_index = index
        return changed

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def apply_intent(self, intent: Intent) -> bool:
        """
        Apply a gesture Intent to the active counter / selection.

        Count changes are clamped to [0, target_value] and only committed when
        the value actually moves. Switches stop at the collection edges.

        Returns:
            True if state changed.
        """
        kind = intent.kind
        if kind in (IntentKind.INCREMENT, IntentKind.DECREMENT):
            counter = self._counters[self._active_index]
            delta = intent.amount if kind is IntentKind.INCREMENT else -intent.amount
            new_count = clamp(counter.count + delta, 0, counter.target_value)
            if new_count == counter.count:
                return False
            return self.update_counter(counter.id, {"count": new_count})

        if kind is IntentKind.SWITCH_PREV:
            return self.set_active_counter_index(self._active_index - 1)

        if kind is IntentKind.SWITCH_NEXT:
            return self.set_active_counter_index(self._active_index + 1)

        # NONE and FEEDBACK_HINT never touch state
        return False

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _index_of(self, counter_id: str) -> Optional[int]:
        for i, counter in enumerate(self._counters):
            if counter.id == counter_id:
                return i
        return None

    def _make_counter(self) -> Counter:
        existing = {c.id for c in self._counters}
        counter_id = self._id_factory()
        while counter_id in existing:
            counter_id = self._id_factory()
        return Counter(id=counter_id, count=0, target_value=self._default_target)
