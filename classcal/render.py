"""
Terminal rendering with rich.

Shared by the CLI sub-commands and the interactive menu. Everything here
takes already computed data (classes, schedules, DayCells) and returns rich
renderables; printing is up to the caller.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from classcal.calendar_grid import month_title, visible_schedules, weekday_names
from classcal.model import Class, DayCell, Schedule, ScheduleType, type_label, type_style
from classcal.timefmt import format_display_date, format_display_time

MORE_LABEL = {"id": "+{n} lagi", "en": "+{n} more"}
TITLE_MAX_LEN = 14


def _short(text: str, max_len: int = TITLE_MAX_LEN) -> str:
    if len(text) > max_len:
        return text[: max_len - 1].rstrip() + "…"
    return text


def time_range(s: Schedule) -> str:
    return f"{format_display_time(s.start_time)}-{format_display_time(s.end_time)}"


def schedule_line(s: Schedule, locale: str = "id") -> Text:
    """One-line summary: '#12 10:00-12:00 [Kuliah] Algorithms @ R.101'."""
    line = Text()
    line.append(f"#{s.id} ", style="dim")
    line.append(time_range(s), style="bold")
    line.append(" ")
    line.append(f"[{type_label(s.type, locale)}]", style=type_style(s.type))
    line.append(f" {s.title}")
    if s.room:
        line.append(f" @ {s.room}", style="magenta")
    return line


def _cell_text(cell: DayCell, locale: str) -> Text:
    if cell.date is None:
        return Text("")

    day_style = "bold" if cell.is_current_month else "dim"
    if cell.is_today:
        day_style = "bold yellow"
    if cell.is_selected:
        day_style += " reverse"

    text = Text(str(cell.date.day), style=day_style)

    shown, rest = visible_schedules(cell)
    for s in shown:
        text.append("\n")
        text.append(f"{format_display_time(s.start_time)} ", style="dim" if not cell.is_current_month else "")
        text.append(_short(s.title), style=type_style(s.type))
    if rest:
        text.append("\n")
        text.append(MORE_LABEL.get(locale, MORE_LABEL["en"]).format(n=rest), style="italic")
    return text


def month_table(cells: Sequence[DayCell], year: int, month: int, locale: str = "id") -> Table:
    """Seven Sunday-first columns, one row per week."""
    table = Table(title=month_title(year, month, locale), box=box.SQUARE, show_lines=True, expand=True)
    for name in weekday_names(locale):
        table.add_column(name, ratio=1, vertical="top")

    for i in range(0, len(cells), 7):
        week = list(cells[i : i + 7])
        # the padded variant may end mid-week
        week += [DayCell(date=None)] * (7 - len(week))
        table.add_row(*[_cell_text(c, locale) for c in week])
    return table


def classes_table(classes: Sequence[Class]) -> Table:
    table = Table(title="Classes", box=box.SIMPLE)
    table.add_column("ID", justify="right", style="bold cyan")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Schedules", justify="right", style="yellow")
    for c in classes:
        table.add_row(str(c.id), Text(c.name), Text(c.description or ""), str(c.schedule_count))
    return table


def schedules_table(schedules: Sequence[Schedule], locale: str = "id", title: str = "Schedules") -> Table:
    table = Table(title=Text(title), box=box.SIMPLE)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Time", style="bold")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Room", style="magenta")
    for s in schedules:
        table.add_row(
            str(s.id),
            format_display_date(s.date, locale),
            time_range(s),
            Text(type_label(s.type, locale), style=type_style(s.type)),
            Text(s.title),
            Text(s.room or ""),
        )
    return table


def schedule_detail(s: Schedule, locale: str = "id", class_name: Optional[str] = None) -> Panel:
    """Full view of one schedule, like the detail modal of the web UI."""
    rows = Table.grid(padding=(0, 2))
    rows.add_column(style="bold")
    rows.add_column()

    rows.add_row("Class", Text(class_name or s.class_name or str(s.class_id)))
    rows.add_row("Date", format_display_date(s.date, locale))
    rows.add_row("Time", time_range(s))
    if s.room:
        rows.add_row("Room", Text(s.room))
    if s.lecturer:
        rows.add_row("Lecturer", Text(s.lecturer))
    if s.material_url:
        rows.add_row("Material", Text(s.material_url))
    if s.submission_link:
        rows.add_row("Submission", Text(s.submission_link))

    parts: list = [rows]
    if s.description:
        parts.append(Text(""))
        parts.append(Text(s.description))

    header = Text()
    header.append(f"[{type_label(s.type, locale)}] ", style=type_style(s.type))
    header.append(s.title, style="bold")
    return Panel(Group(*parts), title=header, title_align="left", border_style=type_style(s.type))


def type_totals(counts: Mapping[ScheduleType, int], locale: str = "id") -> Text:
    """'Kuliah 4  Quiz 1  Ujian 0  Tugas 2  Praktikum 0', coloured per type."""
    line = Text()
    for t, n in counts.items():
        if line:
            line.append("  ")
        line.append(f"{t.label(locale)} ", style=t.style)
        line.append(str(n), style="bold")
    return line
