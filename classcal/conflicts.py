"""
Conflict detection.

Given the schedules of a class, detect overlaps on the same date.
Overlap rule:
    start < other_end AND end > other_start

Conflicts are informational: the handlers do not reject overlapping writes
(an assignment deadline may well fall inside a lecture).
"""

from __future__ import annotations

from typing import Sequence

from classcal.model import Schedule
from classcal.timefmt import time_to_minutes


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def find_conflicts(schedules: Sequence[Schedule]) -> list[tuple[Schedule, Schedule]]:
    """
    Find overlapping schedule pairs (A,B), each pair appears once (i<j).
    Overlap only if same date AND time intervals overlap.
    """
    conflicts: list[tuple[Schedule, Schedule]] = []

    parsed: list[tuple[str, int, int, Schedule]] = []
    for s in schedules:
        start = time_to_minutes(s.start_time)
        end = time_to_minutes(s.end_time)
        parsed.append((s.date, start, end, s))

    # O(n^2) is fine for the size of one class calendar
    for i in range(len(parsed)):
        d1, s1, e1, a = parsed[i]
        for j in range(i + 1, len(parsed)):
            d2, s2, e2, b = parsed[j]
            if d1 != d2:
                continue
            if _overlaps(s1, e1, s2, e2):
                conflicts.append((a, b))

    return conflicts
