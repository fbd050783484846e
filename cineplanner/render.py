"""
Terminal rendering of the projected schedule grid (rich tables).

Two views, as in the planner UI:
- per hall: rows = visible slots, one column per day of the week
- per day:  rows = visible slots, one column per hall

Only the cell where a movie starts shows its title; continuation cells show
a bar so the renderer never draws the same movie twice.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from rich import box
from rich.markup import escape
from rich.table import Table

from cineplanner.grid import Cell, Continuation, Grid
from cineplanner.model import Movie
from cineplanner.timegrid import header_slots

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def day_label(d: date) -> str:
    return f"{DAY_NAMES[d.weekday()]} {d.day:02d}-{d.month:02d}"


def cell_text(cell: Cell) -> str:
    if cell is None:
        return ""
    if isinstance(cell, Continuation):
        return "[dim]│[/]"
    return f"[bold cyan]{escape(cell.title)}[/] [dim]{cell.time} {cell.duration}m[/]"


def _row_labels(visible: Sequence[str]) -> list[str]:
    shown = set(header_slots(visible))
    return [t if t in shown else "" for t in visible]


def hall_table(grid: Grid, hall: str, week: Sequence[date], visible: Sequence[str]) -> Table:
    table = Table(title=f"{hall} - week of {week[0].isoformat()}", box=box.SIMPLE)
    table.add_column("Time", justify="right", style="yellow")
    for d in week:
        table.add_column(day_label(d))

    days = grid.get(hall, {})
    for k, label in enumerate(_row_labels(visible)):
        row = [label]
        for d in week:
            cells = days.get(d.isoformat(), [])
            row.append(cell_text(cells[k] if k < len(cells) else None))
        table.add_row(*row)
    return table


def day_table(grid: Grid, day: date, halls: Sequence[str], visible: Sequence[str]) -> Table:
    table = Table(title=f"{day_label(day)} {day.year}", box=box.SIMPLE)
    table.add_column("Time", justify="right", style="yellow")
    for hall in halls:
        table.add_column(hall)

    key = day.isoformat()
    for k, label in enumerate(_row_labels(visible)):
        row = [label]
        for hall in halls:
            cells = grid.get(hall, {}).get(key, [])
            row.append(cell_text(cells[k] if k < len(cells) else None))
        table.add_row(*row)
    return table


def movie_line(m: Movie) -> str:
    bits = [f"{m.date} {m.time}", f"{m.duration}m", m.hall, m.title]
    if m.genre:
        bits.append(f"({m.genre})")
    return " | ".join(bits)


def movies_table(movies: Sequence[Movie], title: str = "Screenings") -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Id", style="dim")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Duration", justify="right")
    table.add_column("Hall", style="green")
    table.add_column("Title", style="bold cyan")
    table.add_column("Genre", style="magenta")
    for i, m in enumerate(movies, start=1):
        table.add_row(str(i), m.id or "", m.date, m.time, f"{m.duration}m", escape(m.hall), escape(m.title), escape(m.genre))
    return table
