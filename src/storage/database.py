"""
SQLite snapshot backend.

Stores the counter snapshot as a single keyed row, the way a browser keeps
it under one localStorage key. Table layout is versioned through
schema_meta; the snapshot payload itself is not.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time
from typing import Optional

from .base import SnapshotBackend

# Schema version - increment when the table layout changes
EXPECTED_SCHEMA_VERSION = 1

SNAPSHOT_KEY = "counters"


class SqliteSnapshotBackend(SnapshotBackend):
    """
    Snapshot storage in a local SQLite file.

    Tables:
    - schema_meta: tracks the table layout version
    - snapshots: key -> payload text, updated_at

    The connection is shared between the caller thread (startup load) and
    the background writer thread, so access is serialized with a lock.
    """

    def __init__(self, database_path: str, key: str = SNAPSHOT_KEY):
        """
        Args:
            database_path: Path to the SQLite database file (":memory:" allowed).
            key: Row key the snapshot is stored under.
        """
        self.database_path = database_path
        self.key = key
        self.conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

        db_dir = os.path.dirname(database_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        logging.info(f"Snapshot database at {database_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self.conn is None:
            self.conn = sqlite3.connect(self.database_path, check_same_thread=False)
        return self.conn

    def _get_schema_version(self) -> Optional[int]:
        """Get current schema version from database."""
        try:
            cursor = self._get_connection().cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_meta'"
            )
            if cursor.fetchone() is None:
                return None

            cursor.execute("SELECT schema_version FROM schema_meta LIMIT 1")
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.Error:
            return None

    def _create_schema(self) -> None:
        cursor = self._get_connection().cursor()
        cursor.execute("DROP TABLE IF EXISTS schema_meta")
        cursor.execute("""
            CREATE TABLE schema_meta (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                schema_version INTEGER NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS snapshots (
                key TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "INSERT INTO schema_meta (id, schema_version) VALUES (1, ?)",
            (EXPECTED_SCHEMA_VERSION,)
        )
        self._get_connection().commit()
        logging.info(f"Created schema version {EXPECTED_SCHEMA_VERSION}")

    def initialize(self) -> None:
        """
        Create tables if missing.

        Unlike an event log, saved counters are user data: an unknown schema
        version is logged, and the snapshots table is kept. A file that is
        not a usable SQLite database is moved aside and replaced with a fresh
        one, so startup falls back to the default counters.
        """
        with self._lock:
            try:
                self._ensure_schema()
            except sqlite3.OperationalError as e:
                logging.error(f"Database initialization error: {e}")
                raise
            except sqlite3.DatabaseError as e:
                logging.warning(f"Unreadable database {self.database_path}: {e}")
                self._move_aside()
                try:
                    self._ensure_schema()
                except sqlite3.Error as retry_error:
                    logging.error(f"Database initialization error: {retry_error}")
                    raise

    def _ensure_schema(self) -> None:
        current_version = self._get_schema_version()
        if current_version is None:
            logging.info("No schema found, creating fresh database.")
            self._create_schema()
        elif current_version != EXPECTED_SCHEMA_VERSION:
            logging.warning(
                f"Schema version mismatch: found {current_version}, "
                f"expected {EXPECTED_SCHEMA_VERSION}. Rewriting schema_meta."
            )
            self._create_schema()
        else:
            logging.debug(f"Schema version {current_version} is current")

    def _move_aside(self) -> None:
        """Close the connection and rename the bad file to <path>.corrupt-<timestamp>."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
        if self.database_path == ":memory:" or not os.path.exists(self.database_path):
            return
        backup_path = f"{self.database_path}.corrupt-{int(time.time())}"
        os.replace(self.database_path, backup_path)
        logging.warning(f"Moved unreadable database to {backup_path}")

    def load(self) -> Optional[str]:
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute("SELECT payload FROM snapshots WHERE key = ?", (self.key,))
                row = cursor.fetchone()
                return row[0] if row else None
            except sqlite3.Error as e:
                # Missing/corrupt database reads as "nothing saved"
                logging.warning(f"Error reading snapshot: {e}")
                return None

    def save(self, payload: str) -> None:
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute(
                    """
                    INSERT INTO snapshots (key, payload, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, payload, time.time()),
                )
                self._get_connection().commit()
                logging.debug(f"Snapshot saved ({len(payload)} bytes)")
            except sqlite3.Error as e:
                logging.error(f"Error saving snapshot: {e}")
                raise

    def get_updated_at(self) -> Optional[float]:
        """Unix timestamp of the last save, or None."""
        with self._lock:
            try:
                cursor = self._get_connection().cursor()
                cursor.execute("SELECT updated_at FROM snapshots WHERE key = ?", (self.key,))
                row = cursor.fetchone()
                return row[0] if row else None
            except sqlite3.Error as e:
                logging.error(f"Error reading snapshot timestamp: {e}")
                return None

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                logging.info("Database connection closed")
