"""
Central data model definitions used across the project.

This module defines the canonical structure of Class and Schedule objects so that:
- the store, the handlers and the calendar all share the same field names
- the JSON wire format (camelCase) is produced in exactly one place
- per-type display data (labels, colours) lives next to the type itself
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, List, Optional


class ScheduleType(str, Enum):
    LECTURE = "LECTURE"
    QUIZ = "QUIZ"
    EXAM = "EXAM"
    ASSIGNMENT = "ASSIGNMENT"
    PRACTICAL = "PRACTICAL"

    @classmethod
    def values(cls) -> List[str]:
        return [t.value for t in cls]

    @classmethod
    def parse(cls, raw: Any) -> Optional["ScheduleType"]:
        """
        Return the matching type, or None if raw is not one of the five values.
        Matching is exact: 'lecture' is not accepted.
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw))
        except ValueError:
            return None

    def label(self, locale: str = "id") -> str:
        table = _LABELS_ID if locale == "id" else _LABELS_EN
        return table[self]

    @property
    def color(self) -> str:
        return _COLORS[self]

    @property
    def style(self) -> str:
        """rich style used for this type in terminal output."""
        return _STYLES[self]


FALLBACK_COLOR = "#6B7280"
FALLBACK_STYLE = "grey50"

_LABELS_EN = {
    ScheduleType.LECTURE: "Lecture",
    ScheduleType.QUIZ: "Quiz",
    ScheduleType.EXAM: "Exam",
    ScheduleType.ASSIGNMENT: "Assignment",
    ScheduleType.PRACTICAL: "Practical",
}

_LABELS_ID = {
    ScheduleType.LECTURE: "Kuliah",
    ScheduleType.QUIZ: "Quiz",
    ScheduleType.EXAM: "Ujian",
    ScheduleType.ASSIGNMENT: "Tugas",
    ScheduleType.PRACTICAL: "Praktikum",
}

_COLORS = {
    ScheduleType.LECTURE: "#3B82F6",
    ScheduleType.QUIZ: "#F59E0B",
    ScheduleType.EXAM: "#EF4444",
    ScheduleType.ASSIGNMENT: "#10B981",
    ScheduleType.PRACTICAL: "#8B5CF6",
}

_STYLES = {
    ScheduleType.LECTURE: "blue",
    ScheduleType.QUIZ: "dark_orange",
    ScheduleType.EXAM: "red",
    ScheduleType.ASSIGNMENT: "green",
    ScheduleType.PRACTICAL: "purple",
}


def type_label(raw: Any, locale: str = "id") -> str:
    t = ScheduleType.parse(raw)
    return t.label(locale) if t else str(raw)


def type_style(raw: Any) -> str:
    t = ScheduleType.parse(raw)
    return t.style if t else FALLBACK_STYLE


@dataclass
class Class:
    """
    A course/section that owns a set of schedules.
    """

    id: int
    name: str
    description: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    schedule_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "scheduleCount": self.schedule_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Class":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            description=data.get("description"),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
            schedule_count=int(data.get("scheduleCount", 0) or 0),
        )


@dataclass
class Schedule:
    """
    One timed event of a class.

    date is always 'YYYY-MM-DD'; start_time/end_time are always 'HH:MM'.
    Conversion from other wire forms happens in the handlers, never here.
    """

    id: int
    class_id: int
    title: str
    type: ScheduleType
    date: str
    start_time: str
    end_time: str
    room: Optional[str] = None
    lecturer: Optional[str] = None
    description: Optional[str] = None
    material_url: Optional[str] = None
    submission_link: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    class_name: Optional[str] = None

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date[:10])

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "classId": self.class_id,
            "title": self.title,
            "type": self.type.value,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "room": self.room,
            "lecturer": self.lecturer,
            "description": self.description,
            "materialUrl": self.material_url,
            "submissionLink": self.submission_link,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.class_name is not None:
            out["className"] = self.class_name
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schedule":
        stype = ScheduleType.parse(data.get("type"))
        if stype is None:
            raise ValueError(f"Invalid schedule type: {data.get('type')!r}")
        return cls(
            id=int(data["id"]),
            class_id=int(data["classId"]),
            title=str(data.get("title", "")),
            type=stype,
            date=str(data.get("date", "")),
            start_time=str(data.get("startTime", "")),
            end_time=str(data.get("endTime", "")),
            room=data.get("room"),
            lecturer=data.get("lecturer"),
            description=data.get("description"),
            material_url=data.get("materialUrl"),
            submission_link=data.get("submissionLink"),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
            class_name=data.get("className"),
        )


@dataclass
class DayCell:
    """
    One slot of the month grid. Derived on every render, never stored.

    date is None for the leading placeholders of the padded grid variant.
    """

    date: Optional[date]
    is_current_month: bool = False
    is_today: bool = False
    is_selected: bool = False
    schedules: List[Schedule] = field(default_factory=list)
