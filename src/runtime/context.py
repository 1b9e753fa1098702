from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from algorithms.gestures import GestureSession, PointerTracker, StepCalculator
from models.config import Config
from state.feedback import FeedbackController, Scheduler
from state.store import CounterStore, IdFactory
from storage.persistence import PersistenceAdapter


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: Config
    store: CounterStore
    persistence: PersistenceAdapter
    feedback: FeedbackController
    session: GestureSession
    pointer: PointerTracker

    # Edit/settings modal state; gestures are suppressed while it is open
    editor_open: bool = False
    editing_counter_id: Optional[str] = None

    # Serializes event handling when driven from several server threads
    lock: threading.RLock = field(default_factory=threading.RLock)

    @property
    def modal_open(self) -> bool:
        return self.editor_open

    def close(self) -> None:
        self.feedback.clear()
        self.persistence.close()


def build_context(
    config: Config,
    persistence: Optional[PersistenceAdapter] = None,
    feedback_scheduler: Optional[Scheduler] = None,
    id_factory: Optional[IdFactory] = None,
) -> RuntimeContext:
    """
    Wire up the store, gesture session, feedback and persistence.

    The store is seeded from the persisted snapshot (or the default counter)
    and every persisted-field change is handed to persistence.save().
    """
    if persistence is None:
        persistence = PersistenceAdapter.from_config(config.storage)

    store = CounterStore(
        counters=persistence.load_counters(),
        default_target=config.counters.default_target,
        id_factory=id_factory,
    )
    store.add_listener(lambda s: persistence.save(s.counters))

    feedback = FeedbackController(
        clear_after=config.feedback.clear_after_ms / 1000.0,
        scheduler=feedback_scheduler,
    )
    session = GestureSession(
        config=config.gestures,
        step_calculator=StepCalculator(config.steps),
        on_gesture_start=lambda _gesture_id: feedback.begin_gesture(),
    )

    logging.info(f"Runtime ready with {len(store)} counter(s)")
    return RuntimeContext(
        config=config,
        store=store,
        persistence=persistence,
        feedback=feedback,
        session=session,
        pointer=PointerTracker(config.gestures),
    )
