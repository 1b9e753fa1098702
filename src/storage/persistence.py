"""
Persistence adapter: the load/save contract the rest of the app relies on.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from models.config import StorageConfig
from models.counter import Counter
from .base import MemoryBackend, SnapshotBackend
from .database import SqliteSnapshotBackend
from .json_file import JsonFileBackend
from .snapshot import dump_snapshot, load_snapshot
from .writer import SnapshotWriter


BACKENDS = ("sqlite", "json", "memory")


def create_backend(storage_cfg: StorageConfig) -> SnapshotBackend:
    """
    Factory function to create a snapshot backend from config.

    Raises:
        ValueError: If storage_cfg.backend is not one of BACKENDS.
    """
    if storage_cfg.backend == "sqlite":
        backend = SqliteSnapshotBackend(storage_cfg.path)
        backend.initialize()
        return backend
    if storage_cfg.backend == "json":
        return JsonFileBackend(storage_cfg.path)
    if storage_cfg.backend == "memory":
        return MemoryBackend()
    raise ValueError(f"Unknown storage backend: {storage_cfg.backend!r}")


class PersistenceAdapter:
    """
    Loads the collection at startup and saves full snapshots on change.

    Loading never fails: a missing or unusable snapshot yields None and the
    store starts from its default counter. Saving is handed to a
    SnapshotWriter and returns immediately.
    """

    def __init__(self, backend: SnapshotBackend, writer: Optional[SnapshotWriter] = None):
        self.backend = backend
        self.writer = writer or SnapshotWriter(backend)

    @classmethod
    def from_config(cls, storage_cfg: StorageConfig) -> "PersistenceAdapter":
        adapter = cls(create_backend(storage_cfg))
        if storage_cfg.background:
            adapter.writer.start()
        return adapter

    def load_counters(self) -> Optional[List[Counter]]:
        """Saved counters in order, or None to use the default collection."""
        return load_snapshot(self.backend.load())

    def save(self, counters: Iterable[Counter]) -> None:
        """Queue a full snapshot write."""
        self.writer.submit(dump_snapshot(counters))

    def flush(self, timeout: Optional[float] = None) -> bool:
        return self.writer.flush(timeout=timeout)

    def close(self) -> None:
        self.writer.stop()
        self.backend.close()
        logging.info("Persistence closed")
