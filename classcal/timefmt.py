"""
Time and date helpers: parsing, validation and display formatting.

Two wire forms exist for a schedule's start/end time:

    bare time       '10:00' or '10:00:00'
    full timestamp  '2025-09-16 10:00:00' or '2025-09-16T10:00:00.000Z'

Internally a schedule always stores 'HH:MM' next to a 'YYYY-MM-DD' date.
Everything that converts between the forms lives in this module.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as duparser

from classcal.errors import TimeFormatError, ValidationError

DateLike = Union[date, datetime, str]

_BARE_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_FULL_TS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ](\d{1,2}):(\d{2})")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONTH_NAMES = {
    "id": [
        "Januari", "Februari", "Maret", "April", "Mei", "Juni",
        "Juli", "Agustus", "September", "Oktober", "November", "Desember",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}

# Sunday first, like the calendar grid
WEEKDAY_NAMES = {
    "id": ["Minggu", "Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu"],
    "en": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
}

WEEKDAY_SHORT = {
    "id": ["Min", "Sen", "Sel", "Rab", "Kam", "Jum", "Sab"],
    "en": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def is_bare_time(raw: str) -> bool:
    return bool(_BARE_TIME_RE.match(raw.strip()))


def is_full_timestamp(raw: str) -> bool:
    return bool(_FULL_TS_RE.match(raw.strip()))


def time_to_seconds(raw: str) -> int:
    """
    Convert 'HH:MM' or 'HH:MM:SS' to seconds since midnight.
    Raises TimeFormatError for invalid formats or out-of-range values.
    """
    m = _BARE_TIME_RE.match(raw.strip())
    if not m:
        raise TimeFormatError(f"Invalid time format: {raw!r}")
    h = int(m.group(1))
    mi = int(m.group(2))
    s = int(m.group(3) or 0)
    if not (0 <= h <= 23 and 0 <= mi <= 59 and 0 <= s <= 59):
        raise TimeFormatError(f"Invalid time value: {raw!r}")
    return h * 3600 + mi * 60 + s


def time_to_minutes(raw: str) -> int:
    return time_to_seconds(raw) // 60


def parse_timestamp(raw: str) -> datetime:
    """
    Parse a full ISO-8601 timestamp ('T' or space separated, optional
    fraction and offset).
    """
    if not is_full_timestamp(raw):
        raise TimeFormatError(f"Invalid timestamp: {raw!r}")
    try:
        return duparser.isoparse(raw.strip())
    except ValueError as e:
        raise TimeFormatError(f"Invalid timestamp: {raw!r}") from e


def to_date(value: DateLike) -> date:
    """
    Reduce a date, datetime or 'YYYY-MM-DD[...]' string to a calendar date.

    Strings are cut to their date part before parsing, so the written day
    is kept even when the value carries a UTC offset.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()[:10]
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError("Invalid date") from e


def normalize_date(raw: DateLike) -> str:
    """Return the canonical 'YYYY-MM-DD' form of a date field."""
    if isinstance(raw, str):
        text = raw.strip()
        if not (_DATE_RE.match(text) or is_full_timestamp(text)):
            raise ValidationError("Invalid date")
    return to_date(raw).isoformat()


def normalize_time(raw: str, record_date: str) -> str:
    """
    Convert a start/end value to the canonical 'HH:MM'.

    A full timestamp keeps the wall-clock time as written. Its date part
    must be the record's date, otherwise the request is rejected.
    """
    text = str(raw).strip()
    if is_bare_time(text):
        secs = time_to_seconds(text)
        return f"{secs // 3600:02d}:{secs % 3600 // 60:02d}"
    if is_full_timestamp(text):
        ts = parse_timestamp(text)
        if ts.date().isoformat() != record_date:
            raise TimeFormatError(
                f"Timestamp {text!r} does not fall on the schedule date {record_date}"
            )
        return ts.strftime("%H:%M")
    raise TimeFormatError(f"Invalid time format: {text!r}")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_time_range(start: str, end: str) -> bool:
    """
    True iff end is strictly after start.

    Both values must use the same representation: two bare times are
    compared as seconds since midnight, two full timestamps as datetimes.
    Mixing the two (or an aware with a naive timestamp) raises
    TimeFormatError instead of guessing a date for the bare side.
    """
    s = str(start).strip()
    e = str(end).strip()

    if is_bare_time(s) and is_bare_time(e):
        return time_to_seconds(e) > time_to_seconds(s)

    if is_full_timestamp(s) and is_full_timestamp(e):
        ts_s = parse_timestamp(s)
        ts_e = parse_timestamp(e)
        if (ts_s.tzinfo is None) != (ts_e.tzinfo is None):
            raise TimeFormatError("Cannot compare a timestamp with an offset to one without")
        return ts_e > ts_s

    if (is_bare_time(s) or is_full_timestamp(s)) and (is_bare_time(e) or is_full_timestamp(e)):
        raise TimeFormatError("Start and end time must use the same format")
    raise TimeFormatError(f"Invalid time range: {s!r} - {e!r}")


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def format_display_time(raw: Optional[str]) -> str:
    """
    'HH:MM' for display. Unknown formats are returned unchanged.
    """
    if raw is None:
        return ""
    text = str(raw)

    # "2025-09-16 10:00:00" and "2025-09-16T10:00:00.000Z"
    m = _FULL_TS_RE.match(text.strip()) or _BARE_TIME_RE.match(text.strip())
    if m:
        return f"{int(m.group(1)):02d}:{m.group(2)}"

    return text


def format_display_date(raw: Optional[DateLike], locale: str = "id") -> str:
    """
    Long form date, e.g. 'Selasa, 16 September 2025'.
    Unparseable input is returned unchanged.
    """
    if raw is None:
        return ""
    try:
        d = to_date(raw)
    except ValidationError:
        return str(raw)

    loc = locale if locale in WEEKDAY_NAMES else "id"
    # date.weekday() is Monday=0, the tables are Sunday first
    weekday = WEEKDAY_NAMES[loc][(d.weekday() + 1) % 7]
    month = MONTH_NAMES[loc][d.month - 1]
    return f"{weekday}, {d.day} {month} {d.year}"
