"""
iCalendar (.ics) export.

We convert the schedules of a class into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from classcal.model import Schedule


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(date_yyyy_mm_dd: str, time_hh_mm: str) -> str:
    """
    Convert date + time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{date_yyyy_mm_dd} {time_hh_mm}", "%Y-%m-%d %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def _description(s: Schedule) -> str:
    parts: list[str] = []
    if s.lecturer:
        parts.append(f"Lecturer: {s.lecturer}")
    if s.description:
        parts.append(s.description.strip())
    if s.material_url:
        parts.append(f"Material: {s.material_url}")
    if s.submission_link:
        parts.append(f"Submission: {s.submission_link}")
    return "\n".join(parts)


def export_schedules_to_ics(
    schedules: Sequence[Schedule], out_path: str | Path, class_name: Optional[str] = None
) -> int:
    """
    Export schedules to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//classcal//EN")
    lines.append("CALSCALE:GREGORIAN")
    if class_name:
        lines.append(f"X-WR-CALNAME:{_ics_escape(class_name)}")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for s in schedules:
        try:
            dtstart = _dt_local(s.date, s.start_time)
            dtend = _dt_local(s.date, s.end_time)
        except ValueError:
            continue

        summary = f"[{s.type.value}] {s.title}".strip()

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:classcal-{s.class_id}-{s.id}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if s.room:
            lines.append(f"LOCATION:{_ics_escape(s.room)}")
        desc = _description(s)
        if desc:
            lines.append(f"DESCRIPTION:{_ics_escape(desc)}")
        if s.material_url:
            lines.append(f"URL:{s.material_url}")
        lines.append(f"CATEGORIES:{s.type.value}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
