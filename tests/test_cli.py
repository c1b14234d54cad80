"""
Tests for CLI entry points.

These tests focus on:
- exit codes for invalid input, unknown ids and broken data files
- the happy path of creating a class, adding a schedule and rendering the month
All commands run against a temporary store passed via --data.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from classcal import api
from classcal.cli import main


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.path = self.dir / "store.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out), redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["--data", str(self.path), "--locale", "en", *argv])
        return ctx.exception.code, out.getvalue()

    def test_add_class_requires_name(self) -> None:
        code, _ = self._run("add-class", "")
        self.assertEqual(code, 1)

    def test_unknown_class_is_not_found(self) -> None:
        code, _ = self._run("schedules", "99")
        self.assertEqual(code, 3)

    def test_non_numeric_id_is_invalid(self) -> None:
        code, _ = self._run("calendar", "abc")
        self.assertEqual(code, 1)

    def test_non_ascii_digit_id_is_invalid(self) -> None:
        code, _ = self._run("show", "²")
        self.assertEqual(code, 1)

    def test_usage_error(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["--data", str(self.path), "no-such-command"])
        self.assertEqual(ctx.exception.code, 2)

    def test_broken_store(self) -> None:
        self.path.write_text("{broken", encoding="utf-8")
        code, _ = self._run("classes")
        self.assertEqual(code, 4)

    def test_add_class_schedule_and_calendar(self) -> None:
        code, out = self._run("add-class", "Algoritma", "--description", "Kelas A")
        self.assertEqual(code, 0)
        self.assertIn("Added class 1", out)

        code, out = self._run(
            "add", "1",
            "--title", "Pertemuan 1",
            "--type", "LECTURE",
            "--date", "2025-09-16",
            "--start", "10:00",
            "--end", "12:00",
            "--room", "R.101",
        )
        self.assertEqual(code, 0)
        self.assertIn("Pertemuan 1", out)

        code, out = self._run("calendar", "1", "--year", "2025", "--month", "9", "--select", "2025-09-16")
        self.assertEqual(code, 0)
        self.assertIn("September 2025", out)
        self.assertIn("Tuesday, 16 September 2025", out)

        code, out = self._run("classes")
        self.assertEqual(code, 0)
        self.assertIn("Algoritma", out)

    def test_add_rejects_inverted_time_range(self) -> None:
        api.create_class("Algoritma", path=self.path)
        code, _ = self._run(
            "add", "1", "--title", "X", "--type", "EXAM", "--date", "2025-09-16", "--start", "12:00", "--end", "10:00"
        )
        self.assertEqual(code, 1)
        self.assertEqual(api.list_schedules(path=self.path), [])

    def test_edit_and_remove(self) -> None:
        c = api.create_class("Algoritma", path=self.path)
        s = api.create_schedule(
            c.id,
            {"title": "Kuis", "type": "QUIZ", "date": "2025-09-16", "startTime": "10:00", "endTime": "11:00"},
            path=self.path,
        )

        code, _ = self._run("edit", str(s.id), "--end", "11:30", "--room", "Lab")
        self.assertEqual(code, 0)
        updated = api.get_schedule(s.id, path=self.path)
        self.assertEqual((updated.end_time, updated.room), ("11:30", "Lab"))

        code, _ = self._run("edit", str(s.id))
        self.assertEqual(code, 1)

        code, _ = self._run("remove-class", str(c.id))
        self.assertEqual(code, 0)
        code, _ = self._run("show", str(s.id))
        self.assertEqual(code, 3)

    def test_today_shows_totals_per_type(self) -> None:
        c = api.create_class("Algoritma", path=self.path)
        for day, stype in (("2025-09-16", "LECTURE"), ("2025-09-23", "LECTURE"), ("2025-10-20", "EXAM")):
            api.create_schedule(
                c.id,
                {"title": "X", "type": stype, "date": day, "startTime": "08:00", "endTime": "10:00"},
                path=self.path,
            )
        code, out = self._run("today", str(c.id))
        self.assertEqual(code, 0)
        self.assertIn("Totals:", out)
        self.assertIn("Lecture 2", out)
        self.assertIn("Exam 1", out)
        self.assertIn("Quiz 0", out)

    def test_export(self) -> None:
        c = api.create_class("Algoritma", path=self.path)
        api.create_schedule(
            c.id,
            {"title": "UTS", "type": "EXAM", "date": "2025-10-20", "startTime": "08:00", "endTime": "10:00"},
            path=self.path,
        )
        out_file = self.dir / "algo.ics"
        code, out = self._run("export", str(c.id), str(out_file))
        self.assertEqual(code, 0)
        self.assertIn("Exported 1", out)
        self.assertIn("SUMMARY:[EXAM] UTS", out_file.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
