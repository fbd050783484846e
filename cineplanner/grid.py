"""
Schedule grid construction.

Two steps:

1. place_events: every movie is written into a full-day array (one cell per
   slot) for its hall and start date. Long movies cover the following slots
   and spill into the next date after midnight.
2. project_grid: the full-day arrays are cut down to the visible window.

Cell values:
    None             empty slot
    Movie            the movie starting in this slot
    Continuation     slot covered by a movie that started in an earlier slot

Overlapping movies are not rejected here. Movies are written in ascending
(date, time) order and a later write replaces whatever was in the slot.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from cineplanner.config import SLOT_MINUTES, ScheduleConfig
from cineplanner.model import Movie
from cineplanner.timegrid import all_day_slots, visible_slots

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Continuation:
    """Marks a slot covered by `movie`, which started in an earlier slot."""

    movie: Movie


Cell = Optional[Union[Movie, Continuation]]
# hall -> ISO date -> cells
Grid = dict[str, dict[str, list[Cell]]]


def span_slots(duration: int, slot_minutes: int = SLOT_MINUTES) -> int:
    """
    Number of slots a movie of `duration` minutes covers (at least one).
    """
    return max(1, math.ceil(duration / slot_minutes))


def _day_key(d: Union[date, str]) -> str:
    return d if isinstance(d, str) else d.isoformat()


def place_events(
    movies: Iterable[Movie],
    halls: Sequence[str],
    week: Sequence[Union[date, str]],
    all_slots: Sequence[str],
) -> Grid:
    """
    Place movies into full-day slot arrays for each (hall, date) of `week`.

    `movies` may contain screenings from other weeks or for unknown halls;
    those are skipped. A movie whose time is not a slot start is skipped with
    a warning. No slot is written past the last date of `week`.
    """
    day_keys = [_day_key(d) for d in week]
    day_index = {k: i for i, k in enumerate(day_keys)}
    slot_of = {label: i for i, label in enumerate(all_slots)}
    slots_per_day = len(all_slots)

    grid: Grid = {hall: {k: [None] * slots_per_day for k in day_keys} for hall in halls}

    for movie in sorted(movies, key=lambda m: (m.date, m.time)):
        start_slot = slot_of.get(movie.time)
        if start_slot is None:
            logger.warning("Skipping movie %r: start time %r is not on the slot grid", movie.id, movie.time)
            continue

        start_day = day_index.get(movie.date)
        if start_day is None:
            # Belongs to another week.
            logger.debug("Skipping movie %r: date %s outside displayed week", movie.id, movie.date)
            continue

        hall_days = grid.get(movie.hall)
        if hall_days is None:
            logger.warning("Skipping movie %r: unknown hall %r", movie.id, movie.hall)
            continue

        hall_days[day_keys[start_day]][start_slot] = movie
        marker = Continuation(movie)

        for i in range(1, span_slots(movie.duration)):
            slot = start_slot + i
            target_day = start_day
            if slot >= slots_per_day:
                target_day += slot // slots_per_day
                slot %= slots_per_day
            if target_day >= len(day_keys):
                # no wraparound into the next week
                break
            hall_days[day_keys[target_day]][slot] = marker

    return grid


def project_grid(full_grid: Grid, visible: Sequence[str], all_slots: Sequence[str]) -> Grid:
    """
    Re-index every full-day array onto the visible slot labels.

    The result rows always have len(visible) cells.
    """
    slot_of = {label: i for i, label in enumerate(all_slots)}
    indexes = [slot_of.get(label) for label in visible]

    projected: Grid = {}
    for hall, days in full_grid.items():
        projected[hall] = {}
        for day, row in days.items():
            projected[hall][day] = [row[i] if i is not None else None for i in indexes]
    return projected


def build_week_schedule(
    movies: Iterable[Movie],
    config: ScheduleConfig,
    week: Sequence[Union[date, str]],
) -> Grid:
    """
    Full pipeline: place movies for `week`, then project to the visible window.
    """
    slots = all_day_slots()
    full = place_events(movies, config.halls, week, slots)
    window = visible_slots(config.start_hour, config.end_hour, slots)
    return project_grid(full, window, slots)


def cell_movie(cell: Cell) -> Optional[Movie]:
    """
    The movie occupying a cell, whether it starts there or continues.
    """
    if isinstance(cell, Continuation):
        return cell.movie
    return cell
