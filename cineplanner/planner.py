"""
Planner: the application state around the pure grid functions.

Holds the configuration, the store, the current list of movies, the week
cursor and the quick-add selection. The UI layers (cli.py, interactive.py)
only talk to this class.

State changes only after the store confirmed them. If the store raises, the
in-memory list is exactly what it was before the call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional, Union

from cineplanner.config import CatalogMovie, ScheduleConfig
from cineplanner.conflicts import overlaps
from cineplanner.errors import ValidationError
from cineplanner.grid import Grid, build_week_schedule
from cineplanner.model import TIME_PATTERN, Movie, validate_movie
from cineplanner.timegrid import all_day_slots, visible_slots
from cineplanner.weeks import WeekCursor, parse_iso_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementResult:
    movie: Movie
    created: bool
    overlap: bool

    @property
    def message(self) -> str:
        action = "added" if self.created else "updated"
        msg = f"Movie {action}: {self.movie.title} ({self.movie.hall}, {self.movie.date} {self.movie.time})"
        if self.overlap:
            msg += " - overlaps another screening in this hall"
        return msg


def _as_date(day: Union[date, str]) -> date:
    return parse_iso_date(day) if isinstance(day, str) else day


class Planner:
    def __init__(self, store: Any, config: Optional[ScheduleConfig] = None, cursor: Optional[WeekCursor] = None):
        self.store = store
        self.config = config if config is not None else ScheduleConfig()
        self.cursor = cursor if cursor is not None else WeekCursor()
        self.movies: list[Movie] = []
        self.quick_add: Optional[CatalogMovie] = None

    # ------------------------------------------------------------------
    # Store operations
    # ------------------------------------------------------------------

    def reload(self) -> list[Movie]:
        self.movies = self.store.list_movies()
        return self.movies

    def find(self, movie_id: str) -> Optional[Movie]:
        for m in self.movies:
            if m.id == movie_id:
                return m
        return None

    def save(self, data: dict[str, Any]) -> PlacementResult:
        """
        Create (no id) or update (id given) a movie.

        Raises ValidationError before anything reaches the store and
        StoreError when the store rejects the call.
        """
        fields = validate_movie(data, self.config.halls)
        movie_id = data.get("id") or None
        candidate = Movie(id=movie_id, **fields)
        overlap = overlaps(candidate, self.movies)

        if movie_id:
            stored = self.store.update(movie_id, fields)
        else:
            stored = self.store.create(fields)

        if any(m.id == stored.id for m in self.movies):
            self.movies = [stored if m.id == stored.id else m for m in self.movies]
        else:
            self.movies = self.movies + [stored]

        if overlap:
            logger.info("Movie %s overlaps another screening in %s", stored.id, stored.hall)
        return PlacementResult(movie=stored, created=not movie_id, overlap=overlap)

    def delete(self, movie_id: str) -> None:
        self.store.delete(movie_id)
        self.movies = [m for m in self.movies if m.id != movie_id]

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def resolve_start_date(self, day: Union[date, str], slot_time: str) -> str:
        """
        Date a movie dropped on (day, slot_time) actually starts on.

        A slot before the window's start hour can only be shown when the
        window runs past midnight, so it belongs to the next day.
        """
        try:
            d = _as_date(day)
        except ValueError as e:
            raise ValidationError({"date": f"Invalid date {day!r}, expected YYYY-MM-DD"}) from e
        if not TIME_PATTERN.match(slot_time):
            raise ValidationError({"time": f"Invalid time {slot_time!r}, expected HH:MM (24h)"})
        window_start = int(self.visible_slots()[0][:2])
        if int(slot_time[:2]) < window_start:
            d = d + timedelta(days=1)
        return d.isoformat()

    def _placement(self, hall: str, day: Union[date, str], slot_time: str, from_grid: bool) -> dict[str, Any]:
        if from_grid:
            start = self.resolve_start_date(day, slot_time)
        else:
            try:
                start = _as_date(day).isoformat()
            except ValueError as e:
                raise ValidationError({"date": f"Invalid date {day!r}, expected YYYY-MM-DD"}) from e
        return {"hall": hall, "date": start, "time": slot_time}

    def handle_drop(
        self,
        hall: str,
        day: Union[date, str],
        slot_time: str,
        payload: Union[Movie, CatalogMovie],
        from_grid: bool = True,
    ) -> PlacementResult:
        """
        Drop a movie on a cell.

        A stored Movie is moved there; a CatalogMovie becomes a new screening.
        Overlaps are reported in the result but do not block the save.

        `from_grid` means (day, slot_time) is a rendered grid cell, so the
        next-day rule of resolve_start_date applies. Pass False when the
        date was given explicitly; it is then stored as-is.
        """
        placement = self._placement(hall, day, slot_time, from_grid)
        if isinstance(payload, Movie):
            data = {**payload.to_dict(), **placement}
            data.pop("created_at", None)
        else:
            data = {"title": payload.title, "genre": payload.genre, "duration": payload.duration, **placement}
        return self.save(data)

    def handle_double_click(
        self, hall: str, day: Union[date, str], slot_time: str, from_grid: bool = True
    ) -> Union[PlacementResult, dict[str, Any]]:
        """
        Quick-add the selected catalog movie at the cell.

        Without a quick-add selection, returns a draft dict (date, time, hall)
        to pre-fill the manual entry form instead.
        """
        if self.quick_add is not None:
            return self.handle_drop(hall, day, slot_time, self.quick_add, from_grid=from_grid)
        return self._placement(hall, day, slot_time, from_grid)

    def move(self, movie: Movie, hall: str, day: Union[date, str], slot_time: str) -> PlacementResult:
        """
        Move a stored movie to an explicitly chosen hall, date and time.
        """
        return self.handle_drop(hall, day, slot_time, movie, from_grid=False)

    # ------------------------------------------------------------------
    # Grid & navigation
    # ------------------------------------------------------------------

    def week(self) -> list[date]:
        return self.cursor.dates()

    def visible_slots(self) -> list[str]:
        return visible_slots(self.config.start_hour, self.config.end_hour, all_day_slots())

    def schedule(self) -> Grid:
        return build_week_schedule(self.movies, self.config, self.week())

    def previous_week(self) -> date:
        return self.cursor.previous_week()

    def next_week(self) -> date:
        return self.cursor.next_week()

    def today(self, now: Optional[date] = None) -> date:
        return self.cursor.today(now)
