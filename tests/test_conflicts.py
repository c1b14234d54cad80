"""
Unit tests for conflict detection.

Definition used here:
- A conflict exists if two schedules overlap in time on the same date.
- Touching endpoints (end == start) is NOT a conflict.
"""

import unittest

from classcal.conflicts import find_conflicts
from tests.helpers import make_schedule


class TestConflicts(unittest.TestCase):
    def test_overlap_same_day(self) -> None:
        schedules = [
            make_schedule(1, "2026-02-19", "10:00", "11:00"),
            make_schedule(2, "2026-02-19", "10:30", "12:00"),
        ]
        confs = find_conflicts(schedules)
        self.assertEqual(len(confs), 1)
        a, b = confs[0]
        self.assertEqual((a.id, b.id), (1, 2))

    def test_no_overlap_touching_end(self) -> None:
        # end == start is allowed (no overlap)
        schedules = [
            make_schedule(1, "2026-02-19", "10:00", "11:00"),
            make_schedule(2, "2026-02-19", "11:00", "12:00"),
        ]
        self.assertEqual(find_conflicts(schedules), [])

    def test_different_day_no_conflict(self) -> None:
        schedules = [
            make_schedule(1, "2026-02-19", "10:00", "11:00"),
            make_schedule(2, "2026-02-20", "10:30", "12:00"),
        ]
        self.assertEqual(find_conflicts(schedules), [])

    def test_contained_range(self) -> None:
        schedules = [
            make_schedule(1, "2026-02-19", "08:00", "17:00"),
            make_schedule(2, "2026-02-19", "09:00", "10:00"),
            make_schedule(3, "2026-02-19", "13:00", "14:00"),
        ]
        pairs = [(a.id, b.id) for a, b in find_conflicts(schedules)]
        self.assertEqual(pairs, [(1, 2), (1, 3)])


if __name__ == "__main__":
    unittest.main()
