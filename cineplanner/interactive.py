from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cineplanner.config import save_settings, validate_window
from cineplanner.conflicts import find_conflicts
from cineplanner.errors import StoreError, ValidationError
from cineplanner.model import Movie
from cineplanner.planner import Planner, PlacementResult
from cineplanner.render import day_label, day_table, hall_table, movie_line, movies_table
from cineplanner.weeks import parse_iso_date

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg, markup=False)


def run_interactive(planner: Planner, settings_path: Optional[str] = None) -> None:
    """
    Interactive menu loop around one Planner.
    """
    view_by_day = False

    while True:
        _print_header(planner, view_by_day)

        choice = _prompt(
            "\n[1] Show schedule\n"
            "[2] Toggle view (per hall / per day)\n"
            "[3] Previous week\n"
            "[4] Next week\n"
            "[5] This week\n"
            "[6] Choose quick-add movie\n"
            "[7] Add screening at a cell\n"
            "[8] Move screening\n"
            "[9] Manage screenings\n"
            "[10] Show conflicts\n"
            "[11] Settings\n"
            "[12] Reload from store\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            _flow_schedule(planner, view_by_day)
        elif choice == "2":
            view_by_day = not view_by_day
            _println(f"View: {'per day' if view_by_day else 'per hall'}")
        elif choice == "3":
            planner.previous_week()
        elif choice == "4":
            planner.next_week()
        elif choice == "5":
            planner.today()
        elif choice == "6":
            _flow_quick_add(planner)
        elif choice == "7":
            _flow_add_at_cell(planner)
        elif choice == "8":
            _flow_move(planner)
        elif choice == "9":
            _flow_manage(planner)
        elif choice == "10":
            _flow_conflicts(planner)
        elif choice == "11":
            _flow_settings(planner, settings_path)
        elif choice == "12":
            try:
                planner.reload()
                _println(f"Loaded {len(planner.movies)} screenings.")
            except StoreError as e:
                _println(f"[red]Could not load screenings:[/] {escape(str(e))}")
        else:
            _println("Invalid choice.")


def _print_header(planner: Planner, view_by_day: bool) -> None:
    week = planner.week()
    keys = {d.isoformat() for d in week}
    in_week = sum(1 for m in planner.movies if m.date in keys)
    quick = escape(planner.quick_add.title) if planner.quick_add else "-"

    _println("\n=== CinePlanner (interactive) ===")
    _println(f"Week: {week[0].isoformat()} .. {week[-1].isoformat()} | screenings this week: {in_week}")
    _println(f"View: {'per day' if view_by_day else 'per hall'} | quick-add: {quick}")


def _report(result: PlacementResult) -> None:
    if result.overlap:
        _println(f"[yellow]{escape(result.message)}[/]")
    else:
        _println(f"[green]{escape(result.message)}[/]")


def _report_validation(e: ValidationError) -> None:
    _println("[red]Please fix the following:[/]")
    for field, msg in sorted(e.errors.items()):
        _println(f"  - {field}: {escape(msg)}")


def _pick_index(prompt: str, n: int) -> Optional[int]:
    pick = _prompt(prompt).strip()
    if not pick:
        return None
    if not pick.isdigit():
        _println("Not a number.")
        return None
    i = int(pick)
    if not (1 <= i <= n):
        _println("Out of range.")
        return None
    return i - 1


def _pick_hall(planner: Planner, default: Optional[str] = None) -> Optional[str]:
    halls = list(planner.config.halls)
    for i, h in enumerate(halls, start=1):
        _println(f"{i}) {escape(h)}")
    suffix = f" [blank = {default}]" if default else ""
    idx = _pick_index(f"Hall number{suffix}: ", len(halls))
    if idx is None:
        return default
    return halls[idx]


def _pick_day(planner: Planner, default: Optional[str] = None) -> Optional[date]:
    week = planner.week()
    for i, d in enumerate(week, start=1):
        _println(f"{i}) {day_label(d)}")
    suffix = f" [blank = {default}]" if default else ""
    idx = _pick_index(f"Day number{suffix}: ", len(week))
    if idx is not None:
        return week[idx]
    if default:
        return parse_iso_date(default)
    return None


def _flow_schedule(planner: Planner, view_by_day: bool) -> None:
    grid = planner.schedule()
    visible = planner.visible_slots()

    if view_by_day:
        day = _pick_day(planner)
        if day is None:
            return
        console.print(day_table(grid, day, planner.config.halls, visible))
        return

    for hall in planner.config.halls:
        console.print(hall_table(grid, hall, planner.week(), visible))


def _flow_quick_add(planner: Planner) -> None:
    catalog = list(planner.config.catalog)

    table = Table(title="Catalog", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold cyan")
    table.add_column("Genre", style="magenta")
    table.add_column("Duration", justify="right")
    for i, m in enumerate(catalog, start=1):
        table.add_row(str(i), escape(m.title), escape(m.genre), f"{m.duration}m")
    console.print(table)

    idx = _pick_index("Movie number [blank = clear selection]: ", len(catalog))
    planner.quick_add = catalog[idx] if idx is not None else None
    _println(f"Quick-add: {escape(planner.quick_add.title) if planner.quick_add else '-'}")


def _form(draft: dict[str, Any]) -> dict[str, Any]:
    """
    Manual entry form, pre-filled from `draft`. Blank answers keep the draft value.
    """
    data = dict(draft)
    for field, label in (
        ("title", "Title"),
        ("genre", "Genre"),
        ("duration", "Duration (minutes)"),
        ("date", "Date (YYYY-MM-DD)"),
        ("time", "Start time (HH:MM)"),
        ("hall", "Hall"),
    ):
        current = data.get(field)
        shown = f" [{current}]" if current not in (None, "") else ""
        answer = _prompt(f"{label}{shown}: ").strip()
        if answer:
            data[field] = answer
    return data


def _save(planner: Planner, data: dict[str, Any]) -> None:
    try:
        _report(planner.save(data))
    except ValidationError as e:
        _report_validation(e)
    except StoreError as e:
        _println(f"[red]Could not save the movie, please try again:[/] {escape(str(e))}")


def _flow_add_at_cell(planner: Planner) -> None:
    hall = _pick_hall(planner)
    if hall is None:
        return
    day = _pick_day(planner)
    if day is None:
        return
    slot = _prompt("Start time (HH:MM): ").strip()

    try:
        outcome = planner.handle_double_click(hall, day, slot, from_grid=False)
    except ValidationError as e:
        _report_validation(e)
        return
    except StoreError as e:
        _println(f"[red]Could not save the movie, please try again:[/] {escape(str(e))}")
        return

    if isinstance(outcome, PlacementResult):
        _report(outcome)
        return

    _save(planner, _form(outcome))


def _pick_movie(planner: Planner, title: str) -> Optional[Movie]:
    movies = sorted(planner.movies, key=lambda m: (m.date, m.time, m.hall))
    if not movies:
        _println("No screenings.")
        return None
    console.print(movies_table(movies, title=title))
    idx = _pick_index("Screening number [blank = back]: ", len(movies))
    return movies[idx] if idx is not None else None


def _flow_move(planner: Planner) -> None:
    movie = _pick_movie(planner, "Move screening")
    if movie is None:
        return

    hall = _pick_hall(planner, default=movie.hall)
    day = _pick_day(planner, default=movie.date)
    slot = _prompt(f"Start time (HH:MM) [{movie.time}]: ").strip() or movie.time
    if hall is None or day is None:
        return

    try:
        _report(planner.move(movie, hall, day, slot))
    except ValidationError as e:
        _report_validation(e)
    except StoreError as e:
        _println(f"[red]Could not save the movie, please try again:[/] {escape(str(e))}")


def _flow_manage(planner: Planner) -> None:
    while True:
        movie = _pick_movie(planner, "All screenings")
        if movie is None:
            return

        _println(escape(movie_line(movie)))
        action = _prompt("[e] Edit  [d] Delete  [blank] Back: ").strip().lower()
        if action == "e":
            _save(planner, _form(movie.to_dict()))
        elif action == "d":
            confirm = _prompt("Are you sure you want to delete this screening? [y/N]: ").strip().lower()
            if confirm != "y":
                continue
            try:
                planner.delete(movie.id or "")
                _println(f"Removed: {escape(movie_line(movie))}")
            except StoreError as e:
                _println(f"[red]Could not delete the movie, please try again:[/] {escape(str(e))}")
        else:
            return


def _flow_conflicts(planner: Planner) -> None:
    confs = find_conflicts(planner.movies)
    if not confs:
        _println("No conflicts found.")
        return

    _println(f"Conflicts found: {len(confs)}")
    for k, (a, b) in enumerate(confs, start=1):
        _println(f"{k}. {escape(movie_line(a))}  <->  {escape(movie_line(b))}")


def _flow_settings(planner: Planner, settings_path: Optional[str]) -> None:
    config = planner.config
    _println(f"Visible window: {config.start_hour:02d}:00 - {config.end_hour:02d}:00")

    start_in = _prompt(f"Start hour 0-23 [{config.start_hour}]: ").strip()
    end_in = _prompt(f"End hour 1-24 [{config.end_hour}]: ").strip()
    if not start_in and not end_in:
        return

    try:
        start = int(start_in) if start_in else config.start_hour
        end = int(end_in) if end_in else config.end_hour
    except ValueError:
        _println("Not a number.")
        return

    problems = validate_window(start, end)
    if problems:
        for p in problems:
            _println(f"[red]{escape(p)}[/]")
        return

    planner.config = replace(config, start_hour=start, end_hour=end)
    save_settings(planner.config, settings_path)
    _println(f"Visible window set to {start:02d}:00 - {end:02d}:00")
