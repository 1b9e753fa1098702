"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.config import Config, StorageConfig  # noqa: E402
from runtime.context import build_context  # noqa: E402
from storage.base import MemoryBackend  # noqa: E402
from storage.persistence import PersistenceAdapter  # noqa: E402


class FakeScheduler:
    """Collects scheduled callbacks instead of running timers."""

    def __init__(self):
        self.scheduled = []

    def __call__(self, delay, callback):
        handle = FakeTimer(delay, callback)
        self.scheduled.append(handle)
        return handle

    def fire_all(self):
        for handle in list(self.scheduled):
            handle.fire()


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Run the callback even if cancelled, like a timer racing its cancel."""
        self.callback()


def sequential_ids():
    n = 0

    def factory():
        nonlocal n
        n += 1
        return f"c{n}"

    return factory


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def ctx(memory_backend, scheduler):
    """Runtime context over an in-memory backend with synchronous writes."""
    config = Config(storage=StorageConfig(backend="memory", background=False))
    context = build_context(
        config,
        persistence=PersistenceAdapter(memory_backend),
        feedback_scheduler=scheduler,
        id_factory=sequential_ids(),
    )
    yield context
    context.close()


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
gestures:
  tap_threshold: 5
  swipe_threshold: 50
  hint_threshold: 10
  switch_distance: 100
  switch_velocity: 0.1

steps:
  base: 1
  growth_rate: 1.15
  threshold: 50

storage:
  backend: "sqlite"
  path: "data/test.sqlite"

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "gestures": {
            "tap_threshold": 5,
            "swipe_threshold": 50,
            "hint_threshold": 10,
            "switch_distance": 100,
            "switch_velocity": 0.1,
        },
        "steps": {
            "base": 1,
            "growth_rate": 1.15,
            "threshold": 50,
        },
        "storage": {
            "backend": "sqlite",
            "path": "data/test.sqlite",
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
