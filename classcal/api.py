"""
Request handlers for classes and schedules.

One function per operation, each loading the store, validating the input,
applying the change and saving. Handlers raise:

- ValidationError for bad input (400 in HTTP terms)
- NotFoundError for unknown ids (404)
- StoreError when the data file cannot be read/written

Schedule payloads use the camelCase wire keys:

    title, type, date, startTime, endTime,
    room, lecturer, description, materialUrl, submissionLink

startTime/endTime may be bare 'HH:MM[:SS]' or full timestamps on the same
date; they are always stored and returned as 'HH:MM'.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from classcal.calendar_grid import sort_schedules
from classcal.errors import NotFoundError, ValidationError
from classcal.model import Class, Schedule, ScheduleType
from classcal.storage import allocate_id, load_db, save_db
from classcal.timefmt import normalize_date, normalize_time, validate_time_range

log = logging.getLogger(__name__)

PathLike = Optional[str | Path]

OPTIONAL_FIELDS = ("room", "lecturer", "description", "materialUrl", "submissionLink")
URL_FIELDS = ("materialUrl", "submissionLink")

_UNSET: Any = object()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_id(raw: Any, what: str = "class") -> int:
    """
    Turn a path/CLI id into a positive int.
    Raises ValidationError('Invalid class ID') etc. for anything else.
    """
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {what} ID")
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw if raw is not None else "").strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid {what} ID")
        value = int(text)
    if value <= 0:
        raise ValidationError(f"Invalid {what} ID")
    return value


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _find(rows: list[dict[str, Any]], row_id: int) -> Optional[dict[str, Any]]:
    for row in rows:
        if int(row.get("id", 0)) == row_id:
            return row
    return None


def _require_class(db: dict[str, Any], class_id: int) -> dict[str, Any]:
    row = _find(db["classes"], class_id)
    if row is None:
        raise NotFoundError("Class not found")
    return row


def _require_schedule(db: dict[str, Any], schedule_id: int) -> dict[str, Any]:
    row = _find(db["schedules"], schedule_id)
    if row is None:
        raise NotFoundError("Schedule not found")
    return row


def _class_out(db: dict[str, Any], row: dict[str, Any]) -> Class:
    c = Class.from_dict(row)
    c.schedule_count = sum(1 for s in db["schedules"] if int(s.get("classId", 0)) == c.id)
    return c


def _schedule_out(db: dict[str, Any], row: dict[str, Any]) -> Schedule:
    s = Schedule.from_dict(row)
    parent = _find(db["classes"], s.class_id)
    s.class_name = str(parent.get("name")) if parent else "Unknown Class"
    return s


def _clean_optional(field: str, value: Any) -> Optional[str]:
    """Empty strings become None; URL fields must be http(s) links."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if field in URL_FIELDS:
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError(f"Invalid URL for {field}: {text!r}")
    return text


def _parse_type(raw: Any) -> ScheduleType:
    stype = ScheduleType.parse(raw)
    if stype is None:
        raise ValidationError("Invalid schedule type. Must be one of: " + ", ".join(ScheduleType.values()))
    return stype


def _times(start: Any, end: Any, record_date: str, check_format: bool) -> tuple[str, str]:
    """
    Normalize start/end to 'HH:MM' on record_date and enforce end > start.

    check_format: both values came in the same request, so they must use
    the same representation (bare vs. full timestamp).
    """
    if check_format:
        # raises TimeFormatError on mixed or malformed values
        validate_time_range(str(start), str(end))
    start_n = normalize_time(str(start), record_date)
    end_n = normalize_time(str(end), record_date)
    if not validate_time_range(start_n, end_n):
        raise ValidationError("End time must be after start time")
    return start_n, end_n


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


def list_classes(path: PathLike = None) -> list[Class]:
    """All classes with their schedule counts, ordered by name."""
    db = load_db(path)
    out = [_class_out(db, row) for row in db["classes"]]
    out.sort(key=lambda c: (c.name.casefold(), c.id))
    return out


def get_class(class_id: Any, path: PathLike = None) -> Class:
    cid = parse_id(class_id, "class")
    db = load_db(path)
    return _class_out(db, _require_class(db, cid))


fetch_class = get_class


def create_class(name: Any, description: Any = None, path: PathLike = None) -> Class:
    clean_name = str(name or "").strip()
    if not clean_name:
        raise ValidationError("Name is required")

    db = load_db(path)
    now = _now()
    row = {
        "id": allocate_id(db, "nextClassId"),
        "name": clean_name,
        "description": _clean_optional("description", description),
        "createdAt": now,
        "updatedAt": now,
    }
    db["classes"].append(row)
    save_db(db, path)
    log.info("created class %s (%s)", row["id"], clean_name)
    return _class_out(db, row)


def update_class(class_id: Any, name: Any = None, description: Any = _UNSET, path: PathLike = None) -> Class:
    """
    Rename a class and/or change its description.

    A blank name keeps the current one. Passing description=None clears it;
    leaving description out keeps it.
    """
    cid = parse_id(class_id, "class")
    db = load_db(path)
    row = _require_class(db, cid)

    new_name = str(name or "").strip()
    if new_name:
        row["name"] = new_name
    if description is not _UNSET:
        row["description"] = _clean_optional("description", description)
    row["updatedAt"] = _now()

    save_db(db, path)
    log.info("updated class %s", cid)
    return _class_out(db, row)


def delete_class(class_id: Any, path: PathLike = None) -> int:
    """
    Delete a class and every schedule it owns.
    Returns the number of schedules removed with it.
    """
    cid = parse_id(class_id, "class")
    db = load_db(path)
    row = _require_class(db, cid)

    kept = [s for s in db["schedules"] if int(s.get("classId", 0)) != cid]
    removed = len(db["schedules"]) - len(kept)
    db["schedules"] = kept
    db["classes"].remove(row)

    save_db(db, path)
    log.info("deleted class %s and %d schedules", cid, removed)
    return removed


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------


def list_schedules(
    class_id: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    path: PathLike = None,
) -> list[Schedule]:
    """
    Schedules ordered by (date, start time).

    class_id narrows to one class (unknown ids simply give an empty list);
    start_date/end_date form an inclusive 'YYYY-MM-DD' range.
    """
    cid = parse_id(class_id, "class") if class_id not in (None, "") else None
    lo = normalize_date(start_date) if start_date else None
    hi = normalize_date(end_date) if end_date else None

    db = load_db(path)
    out: list[Schedule] = []
    for row in db["schedules"]:
        if cid is not None and int(row.get("classId", 0)) != cid:
            continue
        d = str(row.get("date", ""))
        if lo is not None and d < lo:
            continue
        if hi is not None and d > hi:
            continue
        out.append(_schedule_out(db, row))
    return sort_schedules(out)


def fetch_schedules_for_class(class_id: Any, path: PathLike = None) -> list[Schedule]:
    """Like list_schedules(class_id), but an unknown class is NotFoundError."""
    cid = parse_id(class_id, "class")
    db = load_db(path)
    _require_class(db, cid)
    rows = [r for r in db["schedules"] if int(r.get("classId", 0)) == cid]
    return sort_schedules(_schedule_out(db, r) for r in rows)


def get_schedule(schedule_id: Any, path: PathLike = None) -> Schedule:
    sid = parse_id(schedule_id, "schedule")
    db = load_db(path)
    return _schedule_out(db, _require_schedule(db, sid))


def create_schedule(class_id: Any, data: dict[str, Any], path: PathLike = None) -> Schedule:
    cid = parse_id(class_id, "class")

    required = ("title", "type", "date", "startTime", "endTime")
    if any(not str(data.get(k) or "").strip() for k in required):
        raise ValidationError("Title, type, date, start time, and end time are required")

    stype = _parse_type(data["type"])

    db = load_db(path)
    _require_class(db, cid)

    record_date = normalize_date(data["date"])
    start, end = _times(data["startTime"], data["endTime"], record_date, check_format=True)

    now = _now()
    row: dict[str, Any] = {
        "id": allocate_id(db, "nextScheduleId"),
        "classId": cid,
        "title": str(data["title"]).strip(),
        "type": stype.value,
        "date": record_date,
        "startTime": start,
        "endTime": end,
    }
    for key in OPTIONAL_FIELDS:
        row[key] = _clean_optional(key, data.get(key))
    row["createdAt"] = now
    row["updatedAt"] = now

    db["schedules"].append(row)
    save_db(db, path)
    log.info("created schedule %s for class %s on %s %s-%s", row["id"], cid, record_date, start, end)
    return _schedule_out(db, row)


def update_schedule(schedule_id: Any, data: dict[str, Any], path: PathLike = None) -> Schedule:
    """
    Partial update. Missing keys keep their value; for the optional fields
    an explicit None or '' clears the value. Title and type can not be
    cleared, a blank value keeps the current one.
    """
    sid = parse_id(schedule_id, "schedule")
    db = load_db(path)
    row = _require_schedule(db, sid)

    if data.get("type"):
        row_type = _parse_type(data["type"]).value
    else:
        row_type = row["type"]

    record_date = normalize_date(data["date"]) if data.get("date") else str(row["date"])

    has_start = bool(data.get("startTime"))
    has_end = bool(data.get("endTime"))
    start, end = _times(
        data["startTime"] if has_start else row["startTime"],
        data["endTime"] if has_end else row["endTime"],
        record_date,
        check_format=has_start and has_end,
    )

    title = str(data.get("title") or "").strip()
    if title:
        row["title"] = title
    row["type"] = row_type
    row["date"] = record_date
    row["startTime"] = start
    row["endTime"] = end
    for key in OPTIONAL_FIELDS:
        if key in data:
            row[key] = _clean_optional(key, data[key])
    row["updatedAt"] = _now()

    save_db(db, path)
    log.info("updated schedule %s", sid)
    return _schedule_out(db, row)


def delete_schedule(schedule_id: Any, path: PathLike = None) -> None:
    sid = parse_id(schedule_id, "schedule")
    db = load_db(path)
    row = _require_schedule(db, sid)
    db["schedules"].remove(row)
    save_db(db, path)
    log.info("deleted schedule %s", sid)
