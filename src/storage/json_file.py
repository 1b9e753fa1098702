"""
JSON file snapshot backend.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from .base import SnapshotBackend


class JsonFileBackend(SnapshotBackend):
    """
    Keeps the snapshot in one JSON file.

    Writes go to a temp file in the same directory and are then swapped in
    with os.replace, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: str):
        self.path = path
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logging.warning(f"Error reading snapshot file {self.path}: {e}")
            return None

    def save(self, payload: str) -> None:
        directory = os.path.dirname(self.path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".counters-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logging.error(f"Error writing snapshot file {self.path}: {e}")
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
