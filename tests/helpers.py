"""
Small builders shared by the test modules.
"""

from __future__ import annotations

from typing import Any

from classcal.model import Schedule, ScheduleType


def make_schedule(sid: int, day: str, start: str = "10:00", end: str = "11:00", **kw: Any) -> Schedule:
    return Schedule(
        id=sid,
        class_id=kw.pop("class_id", 1),
        title=kw.pop("title", f"Schedule {sid}"),
        type=kw.pop("type", ScheduleType.LECTURE),
        date=day,
        start_time=start,
        end_time=end,
        **kw,
    )
