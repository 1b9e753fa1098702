"""
Typed models for the swipe counter application.

These models give the gesture engine, the counter store and the storage
layer one shared vocabulary. Use the from_dict/to_dict adapters at the
boundaries (YAML config, JSON snapshots, HTTP payloads).
"""

from .counter import Counter, DEFAULT_TARGET_VALUE
from .gesture import (
    DragEvent,
    Intent,
    IntentKind,
    NO_INTENT,
    DIRECTION_INCREMENT,
    DIRECTION_DECREMENT,
)
from .config import (
    Config,
    GestureConfig,
    StepConfig,
    FeedbackConfig,
    CountersConfig,
    StorageConfig,
    WebConfig,
)

__all__ = [
    # Counters
    "Counter",
    "DEFAULT_TARGET_VALUE",
    # Gestures
    "DragEvent",
    "Intent",
    "IntentKind",
    "NO_INTENT",
    "DIRECTION_INCREMENT",
    "DIRECTION_DECREMENT",
    # Config
    "Config",
    "GestureConfig",
    "StepConfig",
    "FeedbackConfig",
    "CountersConfig",
    "StorageConfig",
    "WebConfig",
]
