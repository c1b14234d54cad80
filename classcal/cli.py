"""
CLI (Command Line Interface).

This module provides terminal commands for managing classes and schedules, e.g.:

    classcal classes
    classcal add-class "Algoritma" --description "Kelas A"
    classcal add 1 --title "Pertemuan 1" --type LECTURE --date 2025-09-16 --start 10:00 --end 12:00
    classcal calendar 1 --month 9 --year 2025
    classcal export 1 out.ics
    classcal interactive

Global options (before the command):
    --data PATH       JSON store to use (default: $CLASSCAL_DATA or the package data dir)
    --locale id|en    display language (default: $CLASSCAL_LOCALE or id)
    -v / -vv          log INFO / DEBUG messages to stderr

Exit codes: 0 ok, 1 invalid input, 2 usage error, 3 not found, 4 store failure.

Note:
- The interactive UI lives in classcal/interactive.py
- All rendering goes through classcal/render.py
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from typing import Any, Callable

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from classcal import api
from classcal.calendar_grid import count_by_type, month_cells, todays_schedules, upcoming_schedules
from classcal.config import resolve_data_path, resolve_locale
from classcal.conflicts import find_conflicts
from classcal.errors import ClassCalError, NotFoundError, StoreError, ValidationError
from classcal.export_ics import export_schedules_to_ics
from classcal.model import Schedule, ScheduleType
from classcal.render import (
    classes_table,
    month_table,
    schedule_detail,
    schedule_line,
    schedules_table,
    type_totals,
)
from classcal.timefmt import format_display_date, to_date

log = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_FOUND = 3
EXIT_STORE = 4

# CLI flag -> wire key of the schedule payload
SCHEDULE_FLAGS = {
    "title": "title",
    "type": "type",
    "date": "date",
    "start": "startTime",
    "end": "endTime",
    "room": "room",
    "lecturer": "lecturer",
    "description": "description",
    "material_url": "materialUrl",
    "submission_link": "submissionLink",
}


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _schedule_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Only the flags that were given end up in the payload ('' clears a field)."""
    data: dict[str, Any] = {}
    for flag, key in SCHEDULE_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None:
            data[key] = value
    return data


def _changed_line(verb: str, s: Schedule, locale: str) -> Text:
    out = Text(f"{verb}: ")
    out.append_text(schedule_line(s, locale))
    out.append(f" on {s.date}")
    return out


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_classes(args: argparse.Namespace) -> int:
    classes = api.list_classes(path=args.data)
    if not classes:
        console.print("No classes yet. Add one with: classcal add-class NAME")
        return EXIT_OK
    console.print(classes_table(classes))
    return EXIT_OK


def _cmd_add_class(args: argparse.Namespace) -> int:
    c = api.create_class(args.name, args.description, path=args.data)
    console.print(f"Added class {c.id}: {escape(c.name)}")
    return EXIT_OK


def _cmd_edit_class(args: argparse.Namespace) -> int:
    if args.description is None:
        c = api.update_class(args.class_id, name=args.name, path=args.data)
    else:
        c = api.update_class(args.class_id, name=args.name, description=args.description, path=args.data)
    console.print(f"Updated class {c.id}: {escape(c.name)}")
    return EXIT_OK


def _cmd_remove_class(args: argparse.Namespace) -> int:
    removed = api.delete_class(args.class_id, path=args.data)
    console.print(f"Removed class {args.class_id} ({removed} schedules deleted)")
    return EXIT_OK


def _cmd_schedules(args: argparse.Namespace) -> int:
    c = api.fetch_class(args.class_id, path=args.data)
    schedules = api.list_schedules(c.id, start_date=args.date_from, end_date=args.date_to, path=args.data)
    if not schedules:
        console.print(f"No schedules for {escape(c.name)}.")
        return EXIT_OK
    console.print(schedules_table(schedules, args.locale, title=c.name))
    return EXIT_OK


def _cmd_show(args: argparse.Namespace) -> int:
    s = api.get_schedule(args.schedule_id, path=args.data)
    console.print(schedule_detail(s, args.locale))
    return EXIT_OK


def _cmd_add(args: argparse.Namespace) -> int:
    s = api.create_schedule(args.class_id, _schedule_payload(args), path=args.data)
    console.print(_changed_line("Added", s, args.locale))
    return EXIT_OK


def _cmd_edit(args: argparse.Namespace) -> int:
    data = _schedule_payload(args)
    if not data:
        console.print("Nothing to change.")
        return EXIT_INVALID
    s = api.update_schedule(args.schedule_id, data, path=args.data)
    console.print(_changed_line("Updated", s, args.locale))
    return EXIT_OK


def _cmd_remove(args: argparse.Namespace) -> int:
    api.delete_schedule(args.schedule_id, path=args.data)
    console.print(f"Removed schedule {args.schedule_id}")
    return EXIT_OK


def _cmd_calendar(args: argparse.Namespace) -> int:
    c = api.fetch_class(args.class_id, path=args.data)
    schedules = api.fetch_schedules_for_class(c.id, path=args.data)

    today = date.today()
    selected = to_date(args.select) if args.select else None
    anchor = selected or today
    year = args.year if args.year is not None else anchor.year
    month = (args.month - 1) if args.month is not None else anchor.month - 1

    cells = month_cells(year, month, schedules, today=today, selected=selected, padded=args.padded)
    console.print(f"[bold]{escape(c.name)}[/]")
    console.print(month_table(cells, year, month, args.locale))

    if selected is not None:
        day = [cell for cell in cells if cell.is_selected]
        bucket = day[0].schedules if day else []
        console.print(f"\n{format_display_date(selected, args.locale)}")
        if not bucket:
            console.print("  (no schedules)")
        for s in bucket:
            console.print(schedule_line(s, args.locale))
    return EXIT_OK


def _cmd_today(args: argparse.Namespace) -> int:
    c = api.fetch_class(args.class_id, path=args.data)
    schedules = api.fetch_schedules_for_class(c.id, path=args.data)
    today = date.today()

    console.print(f"[bold]{escape(c.name)}[/] - {format_display_date(today, args.locale)}")
    todays = todays_schedules(schedules, today)
    if todays:
        for s in todays:
            console.print(schedule_line(s, args.locale))
    else:
        console.print("No schedules today.")

    upcoming = [s for s in upcoming_schedules(schedules, today, limit=args.limit) if s.day != today]
    if upcoming:
        console.print("\nUpcoming:")
        for s in upcoming:
            console.print(f"{format_display_date(s.date, args.locale)}: ", end="")
            console.print(schedule_line(s, args.locale))

    console.print("\nTotals:")
    console.print(type_totals(count_by_type(schedules), args.locale))
    return EXIT_OK


def _cmd_conflicts(args: argparse.Namespace) -> int:
    schedules = api.fetch_schedules_for_class(args.class_id, path=args.data)
    confs = find_conflicts(schedules)
    if not confs:
        console.print("No conflicts found.")
        return EXIT_OK

    console.print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        line = schedule_line(a, args.locale)
        line.append("  <->  ")
        line.append_text(schedule_line(b, args.locale))
        console.print(f"- {a.date} ", end="")
        console.print(line)
    return EXIT_OK


def _cmd_export(args: argparse.Namespace) -> int:
    c = api.fetch_class(args.class_id, path=args.data)
    schedules = api.fetch_schedules_for_class(c.id, path=args.data)
    if not schedules:
        console.print("No schedules to export.")
        return EXIT_OK

    out_path = (args.out or "").strip()
    if not out_path:
        console.print("Please provide output .ics path.")
        return EXIT_INVALID

    n = export_schedules_to_ics(schedules, out_path, class_name=c.name)
    console.print(f"Exported {n} schedules to: {escape(out_path)}")
    return EXIT_OK


def _cmd_interactive(args: argparse.Namespace) -> int:
    from classcal.interactive import run_interactive

    run_interactive(data_path=args.data, locale=args.locale)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_schedule_flags(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--title", required=required)
    p.add_argument("--type", required=required, help=" | ".join(ScheduleType.values()))
    p.add_argument("--date", required=required, help="YYYY-MM-DD")
    p.add_argument("--start", required=required, help="HH:MM or full timestamp")
    p.add_argument("--end", required=required, help="HH:MM or full timestamp")
    p.add_argument("--room")
    p.add_argument("--lecturer")
    p.add_argument("--description")
    p.add_argument("--material-url", dest="material_url")
    p.add_argument("--submission-link", dest="submission_link")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classcal", description="Class schedule calendar")
    parser.add_argument("--data", type=str, default=None, help="Path of the JSON store")
    parser.add_argument("--locale", type=str, default=None, help="Display language (id, en)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("classes", help="List classes")

    p = sub.add_parser("add-class", help="Create a class")
    p.add_argument("name", type=str)
    p.add_argument("--description", type=str, default=None)

    p = sub.add_parser("edit-class", help="Rename a class or change its description")
    p.add_argument("class_id", type=str)
    p.add_argument("--name", type=str, default=None)
    p.add_argument("--description", type=str, default=None, help="'' clears the description")

    p = sub.add_parser("remove-class", help="Delete a class and all its schedules")
    p.add_argument("class_id", type=str)

    p = sub.add_parser("schedules", help="List schedules of a class")
    p.add_argument("class_id", type=str)
    p.add_argument("--from", dest="date_from", type=str, default=None, help="YYYY-MM-DD (inclusive)")
    p.add_argument("--to", dest="date_to", type=str, default=None, help="YYYY-MM-DD (inclusive)")

    p = sub.add_parser("show", help="Show one schedule in detail")
    p.add_argument("schedule_id", type=str)

    p = sub.add_parser("add", help="Add a schedule to a class")
    p.add_argument("class_id", type=str)
    _add_schedule_flags(p, required=True)

    p = sub.add_parser("edit", help="Change fields of a schedule ('' clears optional fields)")
    p.add_argument("schedule_id", type=str)
    _add_schedule_flags(p, required=False)

    p = sub.add_parser("remove", help="Delete a schedule")
    p.add_argument("schedule_id", type=str)

    p = sub.add_parser("calendar", help="Month calendar of a class")
    p.add_argument("class_id", type=str)
    p.add_argument("--year", type=int, default=None)
    p.add_argument("--month", type=int, default=None, help="1-12, out of range values roll over")
    p.add_argument("--select", type=str, default=None, help="YYYY-MM-DD to highlight and list")
    p.add_argument("--padded", action="store_true", help="Blank cells instead of adjacent-month days")

    p = sub.add_parser("today", help="Today's and upcoming schedules of a class")
    p.add_argument("class_id", type=str)
    p.add_argument("--limit", type=int, default=3)

    p = sub.add_parser("conflicts", help="Show overlapping schedules of a class")
    p.add_argument("class_id", type=str)

    p = sub.add_parser("export", help="Export schedules of a class to .ics")
    p.add_argument("class_id", type=str)
    p.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "classes": _cmd_classes,
    "add-class": _cmd_add_class,
    "edit-class": _cmd_edit_class,
    "remove-class": _cmd_remove_class,
    "schedules": _cmd_schedules,
    "show": _cmd_show,
    "add": _cmd_add,
    "edit": _cmd_edit,
    "remove": _cmd_remove,
    "calendar": _cmd_calendar,
    "today": _cmd_today,
    "conflicts": _cmd_conflicts,
    "export": _cmd_export,
    "interactive": _cmd_interactive,
}


def run(args: argparse.Namespace) -> int:
    """
    Dispatch to the command handler and map errors to exit codes.
    """
    try:
        return COMMANDS[args.command](args)
    except ValidationError as e:
        log.warning("rejected %s: %s", args.command, e)
        err_console.print(f"[red]Invalid input:[/] {escape(str(e))}")
        return EXIT_INVALID
    except NotFoundError as e:
        log.warning("rejected %s: %s", args.command, e)
        err_console.print(f"[red]{escape(str(e))}[/]")
        return EXIT_NOT_FOUND
    except StoreError as e:
        log.error("store failure: %s", e)
        err_console.print("[red]Could not access the schedule data. Please try again.[/]")
        return EXIT_STORE
    except ClassCalError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        return EXIT_INVALID


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)
    args.data = resolve_data_path(args.data)
    args.locale = resolve_locale(args.locale)
    log.debug("using store %s, locale %s", args.data, args.locale)

    raise SystemExit(run(args))
