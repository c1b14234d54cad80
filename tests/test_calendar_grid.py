"""
Unit tests for the month grid, day bucketing and date predicates.

Reference months used below:
- September 2025 starts on a Monday and ends on a Tuesday (35 slots)
- August 2026 starts on a Saturday and has 31 days (42 slots)
- February 2026 starts on a Sunday and has 28 days (28 slots)
"""

import unittest
from datetime import date, datetime, timedelta

from classcal.calendar_grid import (
    bucket_schedules,
    build_month_grid,
    count_by_type,
    is_same_day,
    is_selected,
    is_today,
    month_cells,
    month_title,
    normalize_month,
    schedules_for_date,
    shift_month,
    sort_schedules,
    todays_schedules,
    upcoming_schedules,
    visible_schedules,
    weekday_names,
)
from classcal.model import ScheduleType
from tests.helpers import make_schedule


class TestMonthGrid(unittest.TestCase):
    def test_full_weeks_september_2025(self) -> None:
        grid = build_month_grid(2025, 8)
        self.assertEqual(len(grid), 35)
        self.assertEqual(grid[0], date(2025, 8, 31))
        self.assertEqual(grid[-1], date(2025, 10, 4))
        # Sunday first, Saturday last
        self.assertEqual(grid[0].weekday(), 6)
        self.assertEqual(grid[-1].weekday(), 5)

    def test_six_week_month(self) -> None:
        grid = build_month_grid(2026, 7)
        self.assertEqual(len(grid), 42)
        self.assertEqual(grid[0], date(2026, 7, 26))
        self.assertEqual(grid[-1], date(2026, 9, 5))

    def test_four_week_february(self) -> None:
        grid = build_month_grid(2026, 1)
        self.assertEqual(len(grid), 28)
        self.assertEqual(grid[0], date(2026, 2, 1))
        self.assertEqual(grid[-1], date(2026, 2, 28))

    def test_every_month_contains_each_day_once(self) -> None:
        for year in (2023, 2024, 2025):
            for month in range(12):
                grid = build_month_grid(year, month)
                self.assertEqual(len(grid) % 7, 0)
                in_month = [d for d in grid if d.month == month + 1 and d.year == year]
                days = [d.day for d in in_month]
                self.assertEqual(days, list(range(1, len(days) + 1)))
                self.assertIn(len(days), (28, 29, 30, 31))
                # consecutive days, no gaps
                for a, b in zip(grid, grid[1:]):
                    self.assertEqual(b - a, timedelta(days=1))

    def test_padded_variant(self) -> None:
        grid = build_month_grid(2025, 8, padded=True)
        self.assertEqual(grid[0], None)
        self.assertEqual(grid[1], date(2025, 9, 1))
        self.assertEqual(grid[-1], date(2025, 9, 30))
        self.assertEqual(len(grid), 31)

    def test_month_overflow_is_normalized(self) -> None:
        self.assertEqual(normalize_month(2025, -1), (2024, 11))
        self.assertEqual(normalize_month(2025, 12), (2026, 0))
        self.assertEqual(build_month_grid(2025, -1)[0], date(2024, 12, 1))
        self.assertEqual(build_month_grid(2025, 12), build_month_grid(2026, 0))

    def test_shift_month(self) -> None:
        self.assertEqual(shift_month(2025, 0, -1), (2024, 11))
        self.assertEqual(shift_month(2025, 11, 1), (2026, 0))
        self.assertEqual(shift_month(2025, 5, 0), (2025, 5))

    def test_titles(self) -> None:
        self.assertEqual(month_title(2025, 7, "id"), "Agustus 2025")
        self.assertEqual(month_title(2025, 7, "en"), "August 2025")
        self.assertEqual(weekday_names("id")[0], "Min")
        self.assertEqual(weekday_names("en")[6], "Sat")


class TestPredicates(unittest.TestCase):
    def test_same_day_ignores_time_and_offset(self) -> None:
        self.assertTrue(is_same_day("2025-09-16T23:30:00.000Z", date(2025, 9, 16)))
        self.assertTrue(is_same_day(datetime(2025, 9, 16, 8, 0), "2025-09-16"))
        self.assertFalse(is_same_day("2025-09-16", "2025-09-17"))

    def test_same_day_reflexive_and_symmetric(self) -> None:
        d = date(2025, 9, 16)
        self.assertTrue(is_same_day(d, d))
        for other in (date(2025, 9, 16), date(2025, 9, 17), "2025-09-16"):
            self.assertEqual(is_same_day(d, other), is_same_day(other, d))

    def test_none_is_never_same_day(self) -> None:
        self.assertFalse(is_same_day(None, date(2025, 9, 16)))
        self.assertFalse(is_selected(date(2025, 9, 16), None))

    def test_is_today_with_explicit_today(self) -> None:
        today = date(2025, 9, 16)
        self.assertTrue(is_today("2025-09-16", today))
        self.assertFalse(is_today("2025-09-15", today))
        self.assertTrue(is_today(date.today()))


class TestBucketing(unittest.TestCase):
    def setUp(self) -> None:
        self.schedules = sort_schedules(
            [
                make_schedule(1, "2025-09-16", "13:00", "14:00"),
                make_schedule(2, "2025-09-16", "08:00", "09:00"),
                make_schedule(3, "2025-09-17"),
                make_schedule(4, "2025-10-02"),
                make_schedule(5, "2025-09-16", "10:00", "11:00"),
                make_schedule(6, "2025-09-16", "15:00", "16:00"),
            ]
        )

    def test_buckets_by_day_in_order(self) -> None:
        cells = bucket_schedules(build_month_grid(2025, 8), self.schedules, today=date(2025, 9, 1))
        by_day = {c.date: [s.id for s in c.schedules] for c in cells}
        self.assertEqual(by_day[date(2025, 9, 16)], [2, 5, 1, 6])
        self.assertEqual(by_day[date(2025, 9, 17)], [3])
        # trailing October day of the grid still gets its schedule
        self.assertEqual(by_day[date(2025, 10, 2)], [4])
        self.assertEqual(by_day[date(2025, 9, 1)], [])

    def test_bucket_keeps_input_order(self) -> None:
        unsorted = [make_schedule(9, "2025-09-16", "15:00", "16:00"), make_schedule(8, "2025-09-16", "08:00", "09:00")]
        self.assertEqual([s.id for s in schedules_for_date(unsorted, "2025-09-16")], [9, 8])

    def test_union_of_buckets_is_the_input(self) -> None:
        cells = bucket_schedules(build_month_grid(2025, 8), self.schedules, today=date(2025, 9, 1))
        ids = sorted(s.id for c in cells for s in c.schedules)
        self.assertEqual(ids, [1, 2, 3, 4, 5, 6])

    def test_flags(self) -> None:
        cells = bucket_schedules(
            build_month_grid(2025, 8),
            self.schedules,
            today=date(2025, 9, 10),
            selected=date(2025, 9, 16),
            view_month=(2025, 8),
        )
        first = cells[0]
        self.assertEqual(first.date, date(2025, 8, 31))
        self.assertFalse(first.is_current_month)
        self.assertEqual([c.date for c in cells if c.is_today], [date(2025, 9, 10)])
        self.assertEqual([c.date for c in cells if c.is_selected], [date(2025, 9, 16)])
        self.assertEqual(sum(1 for c in cells if c.is_current_month), 30)

    def test_placeholders_get_empty_buckets(self) -> None:
        cells = bucket_schedules(build_month_grid(2025, 8, padded=True), self.schedules, today=date(2025, 9, 1))
        self.assertIsNone(cells[0].date)
        self.assertEqual(cells[0].schedules, [])
        self.assertFalse(cells[0].is_today)

    def test_visible_schedules_truncates_to_three(self) -> None:
        cells = month_cells(2025, 8, self.schedules, today=date(2025, 9, 1))
        cell = next(c for c in cells if c.date == date(2025, 9, 16))
        shown, rest = visible_schedules(cell)
        self.assertEqual([s.id for s in shown], [2, 5, 1])
        self.assertEqual(rest, 1)
        # the full bucket is still there
        self.assertEqual(len(cell.schedules), 4)

    def test_same_input_same_grid(self) -> None:
        a = month_cells(2025, 8, self.schedules, today=date(2025, 9, 1), selected=date(2025, 9, 16))
        b = month_cells(2025, 8, self.schedules, today=date(2025, 9, 1), selected=date(2025, 9, 16))
        self.assertEqual(a, b)


class TestDashboardHelpers(unittest.TestCase):
    def test_today_and_upcoming(self) -> None:
        schedules = [
            make_schedule(1, "2025-09-20"),
            make_schedule(2, "2025-09-10"),
            make_schedule(3, "2025-09-16", "14:00", "15:00"),
            make_schedule(4, "2025-09-16", "08:00", "09:00"),
            make_schedule(5, "2025-09-30"),
            make_schedule(6, "2025-10-30"),
        ]
        today = date(2025, 9, 16)
        self.assertEqual([s.id for s in todays_schedules(schedules, today)], [3, 4])
        self.assertEqual([s.id for s in upcoming_schedules(schedules, today)], [4, 3, 1])
        self.assertEqual([s.id for s in upcoming_schedules(schedules, today, limit=10)], [4, 3, 1, 5, 6])

    def test_count_by_type(self) -> None:
        schedules = [
            make_schedule(1, "2025-09-16"),
            make_schedule(2, "2025-09-17", type=ScheduleType.EXAM),
            make_schedule(3, "2025-09-18"),
            make_schedule(4, "2025-09-19", type=ScheduleType.ASSIGNMENT),
        ]
        counts = count_by_type(schedules)
        self.assertEqual(list(counts), list(ScheduleType))
        self.assertEqual(counts[ScheduleType.LECTURE], 2)
        self.assertEqual(counts[ScheduleType.EXAM], 1)
        self.assertEqual(counts[ScheduleType.ASSIGNMENT], 1)
        self.assertEqual(counts[ScheduleType.QUIZ], 0)
        self.assertEqual(sum(count_by_type([]).values()), 0)


if __name__ == "__main__":
    unittest.main()
