"""
Snapshot persistence for the counter collection.

Backends move the snapshot text; the codec validates it; the writer keeps
saves off the gesture path; PersistenceAdapter ties them together.
"""

from .base import MemoryBackend, SnapshotBackend
from .database import EXPECTED_SCHEMA_VERSION, SqliteSnapshotBackend
from .json_file import JsonFileBackend
from .persistence import BACKENDS, PersistenceAdapter, create_backend
from .snapshot import SnapshotError, dump_snapshot, load_snapshot, parse_snapshot
from .writer import SnapshotWriter

__all__ = [
    "SnapshotBackend",
    "MemoryBackend",
    "SqliteSnapshotBackend",
    "EXPECTED_SCHEMA_VERSION",
    "JsonFileBackend",
    "BACKENDS",
    "PersistenceAdapter",
    "create_backend",
    "SnapshotError",
    "dump_snapshot",
    "load_snapshot",
    "parse_snapshot",
    "SnapshotWriter",
]
