"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class GestureConfig:
    """Gesture classification thresholds (pointer-movement units, e.g. pixels)."""
    tap_threshold: float = 5.0
    tap_max_duration_ms: float = 250.0
    swipe_threshold: float = 50.0
    hint_threshold: float = 10.0
    switch_distance: float = 100.0
    switch_velocity: float = 0.1

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GestureConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            tap_threshold=float(d.get("tap_threshold", 5.0)),
            tap_max_duration_ms=float(d.get("tap_max_duration_ms", 250.0)),
            swipe_threshold=float(d.get("swipe_threshold", 50.0)),
            hint_threshold=float(d.get("hint_threshold", 10.0)),
            switch_distance=float(d.get("switch_distance", 100.0)),
            switch_velocity=float(d.get("switch_velocity", 0.1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tap_threshold": self.tap_threshold,
            "tap_max_duration_ms": self.tap_max_duration_ms,
            "swipe_threshold": self.swipe_threshold,
            "hint_threshold": self.hint_threshold,
            "switch_distance": self.switch_distance,
            "switch_velocity": self.switch_velocity,
        }


@dataclass
class StepConfig:
    """Distance-to-step scaling: floor(base * growth_rate ** (|d| / threshold))."""
    base: float = 1.0
    growth_rate: float = 1.15
    threshold: float = 50.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StepConfig":
        return cls(
            base=float(d.get("base", 1.0)),
            growth_rate=float(d.get("growth_rate", 1.15)),
            threshold=float(d.get("threshold", 50.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base,
            "growth_rate": self.growth_rate,
            "threshold": self.threshold,
        }


@dataclass
class FeedbackConfig:
    """Transient feedback display."""
    clear_after_ms: float = 300.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FeedbackConfig":
        return cls(clear_after_ms=float(d.get("clear_after_ms", 300.0)))

    def to_dict(self) -> Dict[str, Any]:
        return {"clear_after_ms": self.clear_after_ms}


@dataclass
class CountersConfig:
    """Defaults for newly created counters."""
    default_target: int = 100

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CountersConfig":
        return cls(default_target=int(d.get("default_target", 100)))

    def to_dict(self) -> Dict[str, Any]:
        return {"default_target": self.default_target}


@dataclass
class StorageConfig:
    """Snapshot persistence configuration."""
    backend: str = "sqlite"
    path: str = "data/counters.sqlite"
    background: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StorageConfig":
        return cls(
            backend=d.get("backend", "sqlite"),
            path=d.get("path", "data/counters.sqlite"),
            background=d.get("background", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "path": self.path,
            "background": self.background,
        }


@dataclass
class WebConfig:
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            host=d.get("host", "127.0.0.1"),
            port=int(d.get("port", 5000)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    gestures: GestureConfig = field(default_factory=GestureConfig)
    steps: StepConfig = field(default_factory=StepConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    counters: CountersConfig = field(default_factory=CountersConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/swipe_counter.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            gestures=GestureConfig.from_dict(d.get("gestures") or {}),
            steps=StepConfig.from_dict(d.get("steps") or {}),
            feedback=FeedbackConfig.from_dict(d.get("feedback") or {}),
            counters=CountersConfig.from_dict(d.get("counters") or {}),
            storage=StorageConfig.from_dict(d.get("storage") or {}),
            web=WebConfig.from_dict(d.get("web") or {}),
            log_path=d.get("log_path", "logs/swipe_counter.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "gestures": self.gestures.to_dict(),
            "steps": self.steps.to_dict(),
            "feedback": self.feedback.to_dict(),
            "counters": self.counters.to_dict(),
            "storage": self.storage.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
