"""
Snapshot backend interface.

A backend only moves the snapshot text in and out of durable storage; the
codec (storage.snapshot) decides what the text means.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class SnapshotBackend(ABC):
    """Durable load/save of a single snapshot payload."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """
        Read the stored payload.

        Returns:
            The payload text, or None if nothing has been saved yet.
        """

    @abstractmethod
    def save(self, payload: str) -> None:
        """Replace the stored payload."""

    def close(self) -> None:
        """Release resources (no-op by default)."""


class MemoryBackend(SnapshotBackend):
    """In-process backend for tests and throwaway sessions."""

    def __init__(self, payload: Optional[str] = None):
        self.payload = payload
        self.save_count = 0

    def load(self) -> Optional[str]:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload
        self.save_count += 1
