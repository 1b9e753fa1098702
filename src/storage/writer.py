"""
Fire-and-forget snapshot writer.

Gesture handling must never wait on disk. The writer keeps only the most
recent pending payload and a daemon thread writes it to the backend, so a
burst of mutations collapses into as few writes as the backend can absorb.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .base import SnapshotBackend


class SnapshotWriter:
    """
    Background writer for snapshot payloads.

    submit() never blocks on I/O. flush() waits until everything submitted so
    far has been written (or failed). Save errors are logged and dropped; the
    next submit retries with fresh state.
    """

    def __init__(self, backend: SnapshotBackend):
        self.backend = backend
        self._cond = threading.Condition()
        self._pending: Optional[str] = None
        self._submitted = 0
        self._completed = 0
        self._stop = False
        self._thread: Optional[threading.Thread] = None
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start background thread for writes."""
        if self.is_running:
            return False
        self._stop = False
        self._thread = threading.Thread(target=self._worker, name="snapshot-writer")
        self._thread.daemon = True
        self._thread.start()
        logging.info("Snapshot writer thread started")
        return True

    def stop(self, timeout: float = 10.0) -> None:
        """Write any pending payload, then stop the background thread."""
        with self._cond:
            self._stop = True
            self._cond.notify_all()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            logging.info("Snapshot writer thread stopped")
        self._thread = None

    def submit(self, payload: str) -> None:
        """Queue a payload, replacing any not-yet-written one."""
        with self._cond:
            self._pending = payload
            self._submitted += 1
            self._cond.notify_all()
        if not self.is_running:
            # No worker: write inline so nothing is lost
            self._drain()

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until all submitted payloads are written.

        Returns:
            False if the timeout expired first.
        """
        if not self.is_running:
            self._drain()
            return True
        with self._cond:
            return self._cond.wait_for(lambda: self._completed >= self._submitted, timeout=timeout)

    def _worker(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending is not None or self._stop)
                if self._pending is None and self._stop:
                    return
            self._drain()

    def _drain(self) -> None:
        with self._cond:
            payload = self._pending
            target = self._submitted
            self._pending = None
        if payload is None:
            return
        try:
            self.backend.save(payload)
        except Exception as e:
            self.failures += 1
            logging.error(f"Snapshot write failed: {e}")
        with self._cond:
            self._completed = max(self._completed, target)
            self._cond.notify_all()
