"""
Central data model definitions used across the project.

This module defines the canonical structure of Movie objects so that:
- the grid engine, the stores and the UI layers share the same field names
- every movie that reaches the schedule went through the same validation
- optional fields have explicit defaults instead of accidental ones
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable, Optional

from cineplanner.errors import ValidationError

TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUIRED_FIELDS = ("title", "date", "time", "duration", "hall")


@dataclass(frozen=True)
class Movie:
    """
    One scheduled screening.

    `id` is None only for drafts that have not been stored yet; the store
    assigns it on create and it never changes afterwards.
    """

    id: Optional[str]
    title: str
    date: str
    time: str
    duration: int
    hall: str
    genre: str = ""
    created_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _parse_duration(value: Any) -> Optional[int]:
    # bool is an int subclass; a checkbox value is never a duration
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def validate_movie(data: dict[str, Any], halls: Optional[Iterable[str]] = None) -> dict[str, Any]:
    """
    Validate raw movie fields and return a normalized copy.

    Raises ValidationError with one message per offending field.
    When `halls` is given, `hall` must be one of them.
    """
    errors: dict[str, str] = {}
    out: dict[str, Any] = {}

    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = "This field is required"

    title = str(data.get("title") or "").strip()
    out["title"] = title

    date_s = str(data.get("date") or "").strip()
    if "date" not in errors:
        try:
            if not DATE_PATTERN.match(date_s):
                raise ValueError(date_s)
            date.fromisoformat(date_s)
        except ValueError:
            errors["date"] = f"Invalid date {date_s!r}, expected YYYY-MM-DD"
    out["date"] = date_s

    time_s = str(data.get("time") or "").strip()
    if "time" not in errors and not TIME_PATTERN.match(time_s):
        errors["time"] = f"Invalid time {time_s!r}, expected HH:MM (24h)"
    out["time"] = time_s

    duration = _parse_duration(data.get("duration"))
    if "duration" not in errors:
        if duration is None:
            errors["duration"] = "Duration must be a whole number of minutes"
        elif duration <= 0:
            errors["duration"] = "Duration must be greater than 0"
    out["duration"] = duration

    hall = str(data.get("hall") or "").strip()
    if "hall" not in errors and halls is not None and hall not in set(halls):
        errors["hall"] = f"Unknown hall {hall!r}"
    out["hall"] = hall

    genre = data.get("genre")
    out["genre"] = str(genre).strip() if genre is not None else ""

    if errors:
        raise ValidationError(errors)

    return out


def movie_from_dict(data: dict[str, Any], halls: Optional[Iterable[str]] = None) -> Movie:
    """
    Build a Movie from a stored/submitted dict. Validates first.
    """
    fields = validate_movie(data, halls)
    raw_id = data.get("id")
    movie_id = str(raw_id).strip() if raw_id is not None and str(raw_id).strip() else None
    created_at = data.get("created_at")
    return Movie(
        id=movie_id,
        created_at=str(created_at) if created_at else None,
        **fields,
    )
