"""
Month calendar engine.

Pure functions only: no I/O, no clock reads unless the caller leaves
`today` unset. Given a month and a list of schedules this module produces
the day grid the presentation layer renders.

Month indexes are 0-11 (0 = January) and overflow is normalized, so
month=-1 is December of the previous year and month=12 is January of the
next one.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from classcal.model import DayCell, Schedule, ScheduleType
from classcal.timefmt import MONTH_NAMES, WEEKDAY_SHORT, DateLike, time_to_seconds, to_date

# the calendar shows at most this many schedules per day, the rest is a count
MAX_VISIBLE_PER_DAY = 3


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


def normalize_month(year: int, month: int) -> Tuple[int, int]:
    """Fold an out-of-range 0-based month into (year, 0..11)."""
    y, m = divmod(month, 12)
    return year + y, m


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    return normalize_month(year, month + delta)


def build_month_grid(year: int, month: int, padded: bool = False) -> List[Optional[date]]:
    """
    Return the day slots for one month, Sunday first.

    Default (full weeks): from the Sunday on/before the 1st to the Saturday
    on/after the last day. Length is a multiple of 7.

    padded=True: None placeholders for the weekdays before the 1st, then the
    days of the month, nothing after.
    """
    y, m = normalize_month(year, month)
    first = date(y, m + 1, 1)
    days_in_month = calendar.monthrange(y, m + 1)[1]
    last = first + timedelta(days=days_in_month - 1)

    # date.weekday(): Monday=0 .. Sunday=6 -> days back to the previous Sunday
    lead = (first.weekday() + 1) % 7

    if padded:
        days: List[Optional[date]] = [None] * lead
        days.extend(first + timedelta(days=i) for i in range(days_in_month))
        return days

    start = first - timedelta(days=lead)
    trail = (5 - last.weekday()) % 7
    end = last + timedelta(days=trail)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def month_title(year: int, month: int, locale: str = "id") -> str:
    y, m = normalize_month(year, month)
    names = MONTH_NAMES.get(locale, MONTH_NAMES["id"])
    return f"{names[m]} {y}"


def weekday_names(locale: str = "id") -> List[str]:
    return list(WEEKDAY_SHORT.get(locale, WEEKDAY_SHORT["id"]))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_same_day(a: Optional[DateLike], b: Optional[DateLike]) -> bool:
    """
    Calendar-day equality on (year, month, day). Time of day and UTC offsets
    are ignored; None on either side is never the same day.
    """
    if a is None or b is None:
        return False
    da = to_date(a)
    db = to_date(b)
    return (da.year, da.month, da.day) == (db.year, db.month, db.day)


def is_today(d: Optional[DateLike], today: Optional[date] = None) -> bool:
    return is_same_day(d, today if today is not None else date.today())


def is_selected(d: Optional[DateLike], selected: Optional[DateLike]) -> bool:
    return is_same_day(d, selected)


# ---------------------------------------------------------------------------
# Bucketing
# ---------------------------------------------------------------------------


def sort_schedules(schedules: Iterable[Schedule]) -> List[Schedule]:
    """Order by (date, start time) the way every list endpoint returns them."""
    return sorted(schedules, key=lambda s: (s.date, time_to_seconds(s.start_time)))


def schedules_for_date(schedules: Sequence[Schedule], day: Optional[DateLike]) -> List[Schedule]:
    """
    All schedules on one calendar day, in their input order.
    """
    if day is None:
        return []
    target = to_date(day)
    return [s for s in schedules if s.day == target]


def bucket_schedules(
    grid: Sequence[Optional[date]],
    schedules: Sequence[Schedule],
    today: Optional[date] = None,
    selected: Optional[DateLike] = None,
    view_month: Optional[Tuple[int, int]] = None,
) -> List[DayCell]:
    """
    Turn grid slots into DayCells holding the schedules of each day.

    view_month is (year, 0-based month) and drives is_current_month; when
    omitted the month of the grid's middle slot is used.
    """
    today = today if today is not None else date.today()

    if view_month is None:
        real = [d for d in grid if d is not None]
        mid = real[len(real) // 2] if real else today
        view_month = (mid.year, mid.month - 1)
    vy, vm = normalize_month(*view_month)

    # one pass over the schedules instead of one filter per slot
    by_day: dict[date, List[Schedule]] = {}
    for s in schedules:
        by_day.setdefault(s.day, []).append(s)

    cells: List[DayCell] = []
    for d in grid:
        if d is None:
            cells.append(DayCell(date=None))
            continue
        cells.append(
            DayCell(
                date=d,
                is_current_month=(d.year, d.month - 1) == (vy, vm),
                is_today=is_today(d, today),
                is_selected=is_selected(d, selected),
                schedules=list(by_day.get(d, [])),
            )
        )
    return cells


def visible_schedules(cell: DayCell, limit: int = MAX_VISIBLE_PER_DAY) -> Tuple[List[Schedule], int]:
    """
    Split a cell's bucket for display: the first `limit` schedules and the
    number of schedules left over. The cell itself is not modified.
    """
    shown = cell.schedules[:limit]
    return shown, len(cell.schedules) - len(shown)


def month_cells(
    year: int,
    month: int,
    schedules: Sequence[Schedule],
    today: Optional[date] = None,
    selected: Optional[DateLike] = None,
    padded: bool = False,
) -> List[DayCell]:
    """Grid + bucketing in one call, the way the calendar view uses it."""
    y, m = normalize_month(year, month)
    grid = build_month_grid(y, m, padded=padded)
    return bucket_schedules(grid, sort_schedules(schedules), today=today, selected=selected, view_month=(y, m))


# ---------------------------------------------------------------------------
# Dashboard helpers
# ---------------------------------------------------------------------------


def todays_schedules(schedules: Sequence[Schedule], today: Optional[date] = None) -> List[Schedule]:
    return schedules_for_date(schedules, today if today is not None else date.today())


def upcoming_schedules(
    schedules: Sequence[Schedule], today: Optional[date] = None, limit: int = 3
) -> List[Schedule]:
    """Schedules from today on, soonest first."""
    today = today if today is not None else date.today()
    return [s for s in sort_schedules(schedules) if s.day >= today][:limit]


def count_by_type(schedules: Iterable[Schedule]) -> Dict[ScheduleType, int]:
    """Number of schedules per type, every type present (zero if unused)."""
    counts = {t: 0 for t in ScheduleType}
    for s in schedules:
        counts[s.type] += 1
    return counts
