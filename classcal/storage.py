"""
Persistent storage for classes and schedules.

Everything lives in one JSON document (default: classcal/data/classcal.json,
see classcal.config):

    {
      "nextClassId": 3,
      "nextScheduleId": 12,
      "classes":   [ {Class as dict}, ... ],
      "schedules": [ {Schedule as dict}, ... ]
    }

Design rationale:
- the document is small, so every operation loads it, changes it and writes
  it back (no partial updates)
- ids come from counters in the document and are never reused
- a missing file is a fresh, empty store; a broken file is an error, because
  silently starting over would throw away the user's data

There is no locking: two processes writing at the same time may lose one
of the updates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from classcal.config import resolve_data_path
from classcal.errors import StoreError

log = logging.getLogger(__name__)


def empty_db() -> dict[str, Any]:
    return {"nextClassId": 1, "nextScheduleId": 1, "classes": [], "schedules": []}


def load_db(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load the store document.

    Returns an empty store if the file does not exist yet.
    Raises StoreError if the file cannot be read or is not a store document.
    """
    db_path = resolve_data_path(path)

    # First run: file does not exist yet -> nothing stored
    if not db_path.exists():
        log.debug("store %s does not exist yet", db_path)
        return empty_db()

    try:
        data = json.loads(db_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise StoreError(f"Could not read {db_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise StoreError(f"Store file {db_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StoreError(f"Store file {db_path} has an unexpected layout")

    db = empty_db()
    for key in ("classes", "schedules"):
        value = data.get(key, [])
        if not isinstance(value, list):
            raise StoreError(f"Store file {db_path}: '{key}' must be a list")
        db[key] = value

    # counters must stay ahead of every stored id, even if the file was hand-edited
    try:
        max_class = max((int(c.get("id", 0)) for c in db["classes"]), default=0)
        max_sched = max((int(s.get("id", 0)) for s in db["schedules"]), default=0)
        db["nextClassId"] = max(int(data.get("nextClassId", 1) or 1), max_class + 1)
        db["nextScheduleId"] = max(int(data.get("nextScheduleId", 1) or 1), max_sched + 1)
    except (AttributeError, TypeError, ValueError) as e:
        raise StoreError(f"Store file {db_path} has invalid ids: {e}") from e
    return db


def save_db(db: dict[str, Any], path: str | Path | None = None) -> None:
    """
    Write the store document.

    Creates parent directories if needed.
    """
    db_path = resolve_data_path(path)

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        db_path.write_text(json.dumps(db, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise StoreError(f"Could not write {db_path}: {e}") from e

    log.info(
        "saved %d classes / %d schedules to %s", len(db["classes"]), len(db["schedules"]), db_path
    )


def allocate_id(db: dict[str, Any], counter: str) -> int:
    """Take the next id from 'nextClassId' or 'nextScheduleId'."""
    new_id = int(db[counter])
    db[counter] = new_id + 1
    return new_id
