"""
CLI (Command Line Interface).

Quick terminal commands for the weekly cinema schedule, e.g.:

    cineplanner week --week 2024-06-10
    cineplanner week --day 2024-06-10
    cineplanner add --catalog "Oppenheimer" --hall "Zaal 1" --date 2024-06-10 --time 20:00
    cineplanner move <id> --date 2024-06-11 --time 21:15
    cineplanner remove <id>
    cineplanner conflicts
    cineplanner settings --start-hour 10 --end-hour 24
    cineplanner interactive

Note:
- The interactive UI lives in cineplanner/interactive.py
- Messages are plain text; only the schedule grids are rich tables
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from cineplanner.config import ScheduleConfig, load_settings, save_settings, validate_window
from cineplanner.conflicts import find_conflicts
from cineplanner.errors import StoreError, ValidationError
from cineplanner.planner import Planner
from cineplanner.render import day_table, hall_table, movie_line, movies_table
from cineplanner.storage import open_store
from cineplanner.weeks import WeekCursor, parse_iso_date

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _date_arg(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _print_validation(e: ValidationError) -> None:
    print("Invalid movie:")
    for field, msg in sorted(e.errors.items()):
        print(f"- {field}: {msg}")


def _build_planner(args: argparse.Namespace) -> Planner:
    """
    Load settings and movies. The week cursor starts at --week (or today).
    """
    config = load_settings(args.settings)
    store = open_store(remote_url=config.remote_url, path=args.data)
    start = getattr(args, "week", None) or date.today()
    planner = Planner(store, config, WeekCursor(start))
    planner.reload()
    return planner


def _cmd_week(args: argparse.Namespace, planner: Planner) -> int:
    """
    Render the schedule grid for one week (per hall) or one day (all halls).
    """
    if args.day is not None:
        planner.cursor.today(args.day)

    grid = planner.schedule()
    visible = planner.visible_slots()

    if args.day is not None:
        console.print(day_table(grid, args.day, planner.config.halls, visible))
        return 0

    halls = planner.config.halls
    if args.hall:
        if args.hall not in halls:
            print(f"Unknown hall: {args.hall}")
            return 1
        halls = (args.hall,)

    for hall in halls:
        console.print(hall_table(grid, hall, planner.week(), visible))
    return 0


def _cmd_list(args: argparse.Namespace, planner: Planner) -> int:
    movies = sorted(planner.movies, key=lambda m: (m.date, m.time, m.hall))
    if getattr(args, "week", None) is not None:
        keys = {d.isoformat() for d in planner.week()}
        movies = [m for m in movies if m.date in keys]

    if not movies:
        print("No screenings.")
        return 0

    console.print(movies_table(movies))
    return 0


def _cmd_add(args: argparse.Namespace, planner: Planner) -> int:
    """
    Add a screening, either from the catalog or from explicit fields.
    """
    data: dict[str, Any] = {
        "title": args.title,
        "genre": args.genre,
        "duration": args.duration,
        "hall": args.hall,
        "date": args.date,
        "time": args.time,
    }

    if args.catalog:
        entry = planner.config.find_catalog_movie(args.catalog)
        if entry is None:
            print(f"Not in catalog: {args.catalog}")
            return 1
        data["title"] = data["title"] or entry.title
        data["genre"] = data["genre"] or entry.genre
        data["duration"] = data["duration"] or entry.duration

    try:
        result = planner.save(data)
    except ValidationError as e:
        _print_validation(e)
        return 1
    except StoreError as e:
        print(f"Could not save: {e}")
        return 1

    print(result.message)
    print(f"Id: {result.movie.id}")
    return 0


def _cmd_move(args: argparse.Namespace, planner: Planner) -> int:
    """
    Move a stored screening. The given date is stored as-is.
    """
    movie = planner.find(args.movie_id)
    if movie is None:
        print(f"Not found: {args.movie_id}")
        return 1

    hall = args.hall or movie.hall
    day = args.date or movie.date
    slot = args.time or movie.time

    try:
        result = planner.move(movie, hall, day, slot)
    except ValidationError as e:
        _print_validation(e)
        return 1
    except StoreError as e:
        print(f"Could not save: {e}")
        return 1

    print(result.message)
    return 0


def _cmd_remove(args: argparse.Namespace, planner: Planner) -> int:
    movie = planner.find(args.movie_id)
    if movie is None:
        print(f"Not found: {args.movie_id}")
        return 1

    try:
        planner.delete(args.movie_id)
    except StoreError as e:
        print(f"Could not delete: {e}")
        return 1

    print(f"Removed: {movie_line(movie)}")
    return 0


def _cmd_conflicts(args: argparse.Namespace, planner: Planner) -> int:
    """
    Print all overlapping screenings (same hall, intersecting time spans).
    """
    confs = find_conflicts(planner.movies)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(f"- {movie_line(a)}  <->  {movie_line(b)}")
    return 0


def _cmd_catalog(args: argparse.Namespace, config: ScheduleConfig) -> int:
    for m in config.catalog:
        print(f"{m.title} | {m.genre} | {m.duration} min")
    return 0


def _cmd_settings(args: argparse.Namespace, config: ScheduleConfig) -> int:
    """
    Show or change the visible window. Invalid bounds are rejected here so
    the grid never has to fall back to the default window.
    """
    if args.start_hour is None and args.end_hour is None:
        print(f"Visible window: {config.start_hour:02d}:00 - {config.end_hour:02d}:00")
        print(f"Halls: {', '.join(config.halls)}")
        print(f"Store: {config.remote_url or 'local file'}")
        return 0

    start = args.start_hour if args.start_hour is not None else config.start_hour
    end = args.end_hour if args.end_hour is not None else config.end_hour
    problems = validate_window(start, end)
    if problems:
        for p in problems:
            print(p)
        return 1

    save_settings(replace(config, start_hour=start, end_hour=end), args.settings)
    print(f"Visible window set to {start:02d}:00 - {end:02d}:00")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="cineplanner", description="Weekly cinema schedule planner")
    parser.add_argument("--data", type=str, default=None, help="Path of the local movies.json store")
    parser.add_argument("--settings", type=str, default=None, help="Path of settings.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_week = sub.add_parser("week", help="Show the schedule grid for a week")
    p_week.add_argument("--week", type=_date_arg, default=None, help="Any date in the week (default: today)")
    p_week.add_argument("--hall", type=str, default=None, help="Only this hall")
    p_week.add_argument("--day", type=_date_arg, default=None, help="Show one day with all halls")

    p_list = sub.add_parser("list", help="List screenings")
    p_list.add_argument("--week", type=_date_arg, default=None, help="Only the week containing this date")

    p_add = sub.add_parser("add", help="Add a screening")
    p_add.add_argument("--catalog", type=str, default=None, help="Take title/genre/duration from the catalog")
    p_add.add_argument("--title", type=str, default=None)
    p_add.add_argument("--genre", type=str, default=None)
    p_add.add_argument("--duration", type=int, default=None, help="Minutes")
    p_add.add_argument("--hall", type=str, required=True)
    p_add.add_argument("--date", type=str, required=True, help="YYYY-MM-DD")
    p_add.add_argument("--time", type=str, required=True, help="HH:MM")

    p_move = sub.add_parser("move", help="Move a screening to another slot")
    p_move.add_argument("movie_id", type=str)
    p_move.add_argument("--hall", type=str, default=None)
    p_move.add_argument("--date", type=str, default=None, help="YYYY-MM-DD")
    p_move.add_argument("--time", type=str, default=None, help="HH:MM")

    p_remove = sub.add_parser("remove", help="Remove a screening")
    p_remove.add_argument("movie_id", type=str)

    sub.add_parser("conflicts", help="Show overlapping screenings")
    sub.add_parser("catalog", help="Show the predefined movie catalog")

    p_settings = sub.add_parser("settings", help="Show or change the visible window")
    p_settings.add_argument("--start-hour", type=int, default=None, help="0-23")
    p_settings.add_argument("--end-hour", type=int, default=None, help="1-24 (24 = midnight)")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "catalog":
        raise SystemExit(_cmd_catalog(args, load_settings(args.settings)))
    if args.command == "settings":
        raise SystemExit(_cmd_settings(args, load_settings(args.settings)))

    try:
        planner = _build_planner(args)
    except StoreError as e:
        print(f"Could not load screenings: {e}")
        raise SystemExit(1)

    if args.command == "week":
        raise SystemExit(_cmd_week(args, planner))
    if args.command == "list":
        raise SystemExit(_cmd_list(args, planner))
    if args.command == "add":
        raise SystemExit(_cmd_add(args, planner))
    if args.command == "move":
        raise SystemExit(_cmd_move(args, planner))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args, planner))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, planner))

    if args.command == "interactive":
        from cineplanner.interactive import run_interactive

        run_interactive(planner, settings_path=args.settings)
        raise SystemExit(0)

    raise SystemExit(2)
