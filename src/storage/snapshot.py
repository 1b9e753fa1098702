"""
Snapshot codec for the counter collection.

Format: a JSON array of {id, count, targetValue, name?, color?} objects in
collection order. There is no schema version field.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional, Union

from models.counter import Counter


class SnapshotError(ValueError):
    """Raised when a persisted snapshot cannot be used."""


def parse_snapshot(raw: Union[str, bytes, List[Any], None]) -> List[Counter]:
    """
    Decode and validate a snapshot.

    Accepts the JSON text or an already-decoded list. Counts above their
    target are clamped down to the target.

    Raises:
        SnapshotError: If the snapshot is missing, unparseable or mis-shaped.
    """
    if raw is None:
        raise SnapshotError("no snapshot")

    data: Any = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotError(f"snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SnapshotError(f"snapshot must be a list, got {type(data).__name__}")
    if not data:
        raise SnapshotError("snapshot is empty")

    counters: List[Counter] = []
    seen = set()
    for i, entry in enumerate(data):
        try:
            counter = Counter.from_dict(entry)
        except ValueError as e:
            raise SnapshotError(f"snapshot entry {i}: {e}") from e
        if counter.id in seen:
            raise SnapshotError(f"snapshot entry {i}: duplicate id {counter.id!r}")
        seen.add(counter.id)
        if counter.count > counter.target_value:
            logging.warning(
                f"Counter {counter.id} count {counter.count} exceeds target "
                f"{counter.target_value}; clamping"
            )
            counter.count = counter.target_value
        counters.append(counter)
    return counters


def load_snapshot(raw: Union[str, bytes, List[Any], None]) -> Optional[List[Counter]]:
    """
    Decode a snapshot, returning None instead of raising.

    None tells the caller to fall back to the default collection.
    """
    if raw is None:
        logging.info("No saved counters found, starting with defaults")
        return None
    try:
        return parse_snapshot(raw)
    except SnapshotError as e:
        logging.warning(f"Ignoring unreadable counter snapshot: {e}")
        return None


def dump_snapshot(counters: Iterable[Counter]) -> str:
    """Encode counters as snapshot JSON."""
    return json.dumps([c.to_dict() for c in counters], separators=(",", ":"))
