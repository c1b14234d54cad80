"""
Interactive menu: pick a class, browse its month calendar, open and edit schedules.

All UI state (viewed month, selected day, selected schedule) lives in one
ViewState object that is passed to every step; navigation itself is the
pure function `navigate`, so it can be tested without a terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

from classcal import api
from classcal.calendar_grid import count_by_type, month_cells, shift_month, todays_schedules, upcoming_schedules
from classcal.errors import ClassCalError, NotFoundError, StoreError, ValidationError
from classcal.model import Schedule, ScheduleType, type_label
from classcal.render import classes_table, month_table, schedule_detail, schedule_line, type_totals
from classcal.timefmt import format_display_date, to_date

log = logging.getLogger(__name__)

console = Console()


@dataclass(frozen=True)
class ViewState:
    class_id: Optional[int]
    year: int
    month: int  # 0-11
    selected: date
    schedule_id: Optional[int] = None


def initial_state(today: Optional[date] = None, class_id: Optional[int] = None) -> ViewState:
    today = today or date.today()
    return ViewState(class_id=class_id, year=today.year, month=today.month - 1, selected=today)


def navigate(state: ViewState, action: str, today: Optional[date] = None) -> Optional[ViewState]:
    """
    Apply a navigation key:
        'p' previous month, 'n' next month, 't' jump to today,
        a day number (e.g. '16') or 'YYYY-MM-DD' selects that day.

    Returns None for input that is not a navigation key.
    """
    action = action.strip()
    today = today or date.today()

    if action == "p":
        y, m = shift_month(state.year, state.month, -1)
        return replace(state, year=y, month=m)
    if action == "n":
        y, m = shift_month(state.year, state.month, 1)
        return replace(state, year=y, month=m)
    if action == "t":
        return replace(state, year=today.year, month=today.month - 1, selected=today)

    if action.isdigit():
        try:
            day = date(state.year, state.month + 1, int(action))
        except ValueError:
            return None
        return replace(state, selected=day)

    try:
        day = to_date(action)
    except ClassCalError:
        return None
    return replace(state, year=day.year, month=day.month - 1, selected=day)


def _println(msg: Any = "") -> None:
    # menu and user text contain brackets, so no rich markup here
    console.print(msg, markup=False, highlight=False)


def _error(msg: Any) -> None:
    console.print(Text(str(msg), style="red"))


def _prompt(msg: str) -> str:
    return console.input(msg, markup=False)


# ---------------------------------------------------------------------------
# Main loop
# ---------------------------------------------------------------------------


def run_interactive(data_path: str | Path | None = None, locale: str = "id") -> None:
    """
    Interactive menu loop. Errors from the handlers are shown and the loop
    continues; only [0] leaves.
    """
    state = initial_state()

    while True:
        try:
            if state.class_id is None:
                class_id = _flow_pick_class(data_path)
                if class_id is None:
                    _println("Bye.")
                    return
                state = replace(state, class_id=class_id, schedule_id=None)

            try:
                schedules = _show_month(state, data_path, locale)
            except NotFoundError:
                _println("Class not found.")
                state = replace(state, class_id=None)
                continue

            choice = _prompt(
                "\n[p]rev / [n]ext month, [t]oday, day number or YYYY-MM-DD to select\n"
                "[v] View schedule  [a] Add schedule  [e] Edit schedule  [x] Delete schedule\n"
                "[u] Today/upcoming  [c] Change class  [0] Exit\n"
                "Select: "
            ).strip().lower()

            if choice == "0":
                _println("Bye.")
                return
            if choice == "c":
                state = replace(state, class_id=None)
            elif choice == "v":
                state = _flow_view(state, schedules, data_path, locale)
            elif choice == "a":
                _flow_add(state, data_path)
            elif choice == "e":
                _flow_edit(state, data_path)
            elif choice == "x":
                _flow_delete(state, schedules, data_path)
            elif choice == "u":
                _flow_today(schedules, locale)
            else:
                new_state = navigate(state, choice)
                if new_state is None:
                    _println("Invalid choice.")
                else:
                    state = new_state
        except StoreError as e:
            log.error("store failure: %s", e)
            _error("Could not access the schedule data. Please try again.")
        except ClassCalError as e:
            _error(e)


def _show_month(state: ViewState, data_path: str | Path | None, locale: str) -> list[Schedule]:
    assert state.class_id is not None
    c = api.fetch_class(state.class_id, path=data_path)
    schedules = api.fetch_schedules_for_class(c.id, path=data_path)

    cells = month_cells(state.year, state.month, schedules, selected=state.selected)
    _println(f"\n=== {c.name} ===")
    if c.description:
        _println(c.description)
    _println(month_table(cells, state.year, state.month, locale))

    bucket = [cell for cell in cells if cell.is_selected]
    _println(f"{format_display_date(state.selected, locale)}:")
    if not bucket or not bucket[0].schedules:
        _println("  (no schedules)")
    else:
        for s in bucket[0].schedules:
            _println(schedule_line(s, locale))
    return schedules


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def _flow_pick_class(data_path: str | Path | None) -> Optional[int]:
    """
    Choose a class, or create one. Returns None when the user leaves.
    """
    while True:
        classes = api.list_classes(path=data_path)
        if classes:
            _println(classes_table(classes))
        else:
            _println("No classes yet.")

        pick = _prompt("Class ID, [k] create class, [0] exit: ").strip().lower()
        if pick == "0":
            return None
        if pick == "k":
            name = _prompt("Class name: ").strip()
            description = _prompt("Description [blank = none]: ").strip()
            try:
                c = api.create_class(name, description or None, path=data_path)
            except ClassCalError as e:
                _error(e)
                continue
            _println(f"Added class {c.id}: {c.name}")
            return c.id
        try:
            class_id = api.parse_id(pick)
        except ValidationError:
            _println("Not a number.")
            continue
        if not any(c.id == class_id for c in classes):
            _println("Class not found.")
            continue
        return class_id


def _pick_schedule_id(schedules: list[Schedule], state: ViewState, verb: str) -> Optional[int]:
    day = [s for s in schedules if s.day == state.selected]
    hint = ", ".join(f"#{s.id}" for s in day)
    msg = f"Schedule ID to {verb}" + (f" ({hint})" if hint else "") + " [blank = back]: "
    pick = _prompt(msg).strip().lstrip("#")
    if not pick:
        return None
    return api.parse_id(pick, "schedule")


def _schedule_of_class(sid: int, state: ViewState, data_path: str | Path | None) -> Optional[Schedule]:
    """The schedule, or None (with a message) if it belongs to another class."""
    s = api.get_schedule(sid, path=data_path)
    if s.class_id != state.class_id:
        _println("That schedule belongs to another class.")
        return None
    return s


def _flow_view(
    state: ViewState, schedules: list[Schedule], data_path: str | Path | None, locale: str
) -> ViewState:
    sid = _pick_schedule_id(schedules, state, "view")
    if sid is None:
        return state
    s = _schedule_of_class(sid, state, data_path)
    if s is None:
        return state
    _println(schedule_detail(s, locale))
    _prompt("\nPress Enter to go back...")
    return replace(state, schedule_id=s.id)


def _ask_type(current: Optional[str] = None) -> str:
    options = ScheduleType.values()
    _println("Types: " + ", ".join(f"{i}) {type_label(t, 'en')}" for i, t in enumerate(options, start=1)))
    suffix = f" [blank = {current}]" if current else ""
    raw = _prompt(f"Type{suffix}: ").strip()
    if raw.isdigit() and 1 <= int(raw) <= len(options):
        return options[int(raw) - 1]
    return raw.upper()


def _flow_add(state: ViewState, data_path: str | Path | None) -> None:
    day = state.selected.isoformat()
    data: dict[str, Any] = {
        "title": _prompt("Title: ").strip(),
        "type": _ask_type(),
        "date": _prompt(f"Date [{day}]: ").strip() or day,
        "startTime": _prompt("Start (HH:MM): ").strip(),
        "endTime": _prompt("End (HH:MM): ").strip(),
        "room": _prompt("Room [optional]: ").strip(),
        "lecturer": _prompt("Lecturer [optional]: ").strip(),
        "description": _prompt("Description [optional]: ").strip(),
        "materialUrl": _prompt("Material URL [optional]: ").strip(),
        "submissionLink": _prompt("Submission link [optional]: ").strip(),
    }
    s = api.create_schedule(state.class_id, data, path=data_path)
    _println(f"Added #{s.id} on {s.date}")


def _flow_edit(state: ViewState, data_path: str | Path | None) -> None:
    """
    Blank answers keep the current value; '-' clears an optional field.
    """
    raw = _prompt("Schedule ID to edit [blank = back]: ").strip().lstrip("#")
    if not raw:
        return
    s = _schedule_of_class(api.parse_id(raw, "schedule"), state, data_path)
    if s is None:
        return

    data: dict[str, Any] = {}
    for key, label, current in (
        ("title", "Title", s.title),
        ("date", "Date", s.date),
        ("startTime", "Start", s.start_time),
        ("endTime", "End", s.end_time),
    ):
        value = _prompt(f"{label} [{current}]: ").strip()
        if value:
            data[key] = value

    stype = _ask_type(s.type.value)
    if stype:
        data["type"] = stype

    for key, label, current in (
        ("room", "Room", s.room),
        ("lecturer", "Lecturer", s.lecturer),
        ("description", "Description", s.description),
        ("materialUrl", "Material URL", s.material_url),
        ("submissionLink", "Submission link", s.submission_link),
    ):
        value = _prompt(f"{label} [{current or ''}] ('-' clears): ").strip()
        if value == "-":
            data[key] = None
        elif value:
            data[key] = value

    if not data:
        _println("Nothing changed.")
        return
    s = api.update_schedule(s.id, data, path=data_path)
    _println(f"Updated #{s.id}")


def _flow_delete(state: ViewState, schedules: list[Schedule], data_path: str | Path | None) -> None:
    sid = _pick_schedule_id(schedules, state, "delete")
    if sid is None:
        return
    s = _schedule_of_class(sid, state, data_path)
    if s is None:
        return
    confirm = _prompt(f"Delete '{s.title}' on {s.date}? [y/N]: ").strip().lower()
    if confirm != "y":
        return
    api.delete_schedule(sid, path=data_path)
    _println(f"Deleted #{sid}")


def _flow_today(schedules: list[Schedule], locale: str) -> None:
    today = date.today()
    _println(f"\nToday, {format_display_date(today, locale)}:")
    todays = todays_schedules(schedules, today)
    if not todays:
        _println("  (no schedules)")
    for s in todays:
        _println(schedule_line(s, locale))

    _println("\nUpcoming:")
    upcoming = upcoming_schedules(schedules, today)
    if not upcoming:
        _println("  (nothing planned)")
    for s in upcoming:
        line = Text(f"{format_display_date(s.date, locale)}: ")
        line.append_text(schedule_line(s, locale))
        _println(line)

    _println("\nTotals:")
    _println(type_totals(count_by_type(schedules), locale))
    _prompt("\nPress Enter to go back...")
