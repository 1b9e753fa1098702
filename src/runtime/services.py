from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from models.gesture import (
    DIRECTION_DECREMENT,
    DIRECTION_INCREMENT,
    DragEvent,
    Intent,
    IntentKind,
    NO_INTENT,
)
from runtime.context import RuntimeContext


class GestureService:
    """
    Runs one gesture event to completion: classify -> apply -> feedback.

    Persistence is triggered by the store's change listener, so nothing here
    waits on I/O.
    """

    def __init__(self, ctx: RuntimeContext):
        self.ctx = ctx

    def handle_event(self, event: Union[DragEvent, Mapping[str, Any]]) -> Intent:
        with self.ctx.lock:
            intent = self.ctx.session.process(event, modal_open=self.ctx.modal_open)
            self._dispatch(intent)
            return intent

    def handle_pointer(
        self,
        phase: str,
        x: float = 0.0,
        y: float = 0.0,
        t: float = 0.0,
        excluded: bool = False,
    ) -> Intent:
        """Feed a raw pointer sample; returns the Intent it resolved to."""
        with self.ctx.lock:
            event = self.ctx.pointer.handle(phase, x, y, t, excluded=excluded)
            if event is None:
                return NO_INTENT
            return self.handle_event(event)

    def _dispatch(self, intent: Intent) -> None:
        if intent.is_none:
            return

        if intent.kind is IntentKind.FEEDBACK_HINT:
            self.ctx.feedback.show(intent.direction, intent.amount, committed=False)
            return

        changed = self.ctx.store.apply_intent(intent)
        if intent.is_count_change:
            if changed:
                direction = DIRECTION_INCREMENT if intent.kind is IntentKind.INCREMENT else DIRECTION_DECREMENT
                self.ctx.feedback.show(direction, intent.amount, committed=True)
            else:
                # Already at a bound: no commit, no feedback
                logging.debug(f"{intent.kind.value} ignored at bound")
        elif intent.is_switch and changed:
            logging.debug(f"Switched to counter index {self.ctx.store.active_index}")


def parse_target_value(raw: Any) -> Optional[int]:
    """
    Parse edit-form input for a target value.

    Accepts ints and strings of decimal digits (surrounding whitespace and a
    leading '+' allowed). Returns None for anything else or for values <= 0.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text.startswith("+"):
            text = text[1:]
        if not text.isdigit() or not text.isascii():
            return None
        value = int(text)
    else:
        return None
    return value if value > 0 else None


class EditService:
    """Edit-form boundary: validates input before it reaches the store."""

    def __init__(self, ctx: RuntimeContext):
        self.ctx = ctx

    def open_editor(self, counter_id: Optional[str] = None) -> None:
        with self.ctx.lock:
            self.ctx.editor_open = True
            self.ctx.editing_counter_id = counter_id or self.ctx.store.active_counter.id
            self.ctx.session.reset()

    def close_editor(self) -> None:
        with self.ctx.lock:
            self.ctx.editor_open = False
            self.ctx.editing_counter_id = None

    def submit_target(self, counter_id: str, raw: Any) -> bool:
        """
        Apply a new target value.

        Invalid input (non-integer, <= 0) or an unknown counter leaves state
        unchanged, keeps the editor open and returns False. On success the
        count is clamped down if it exceeds the new target and the editor
        closes.
        """
        with self.ctx.lock:
            value = parse_target_value(raw)
            if value is None:
                logging.info(f"Rejected target value {raw!r} for counter {counter_id}")
                return False
            counter = self.ctx.store.get_counter(counter_id)
            if counter is None:
                return False

            updates: Dict[str, Any] = {"targetValue": value}
            if counter.count > value:
                updates["count"] = value
            self.ctx.store.update_counter(counter_id, updates)
            self.close_editor()
            return True

    def submit_details(
        self,
        counter_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> bool:
        """Set name and/or color; None leaves a field unchanged."""
        with self.ctx.lock:
            if self.ctx.store.get_counter(counter_id) is None:
                return False
            updates: Dict[str, Any] = {}
            if name is not None:
                updates["name"] = name
            if color is not None:
                updates["color"] = color
            self.ctx.store.update_counter(counter_id, updates)
            return True
