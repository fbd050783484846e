"""
Overlap detection.

Two screenings overlap when they use the same hall and their absolute time
spans intersect:
    start < other_end AND end > other_start

Spans are half-open, so a movie ending at 21:30 does not overlap one
starting at 21:30. Spans may cross midnight.

This is advisory: the planner reports overlaps but still saves them.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from cineplanner.model import Movie


def movie_span(movie: Movie) -> tuple[datetime, datetime]:
    """
    Absolute [start, end) of a screening.
    Raises ValueError if date/time are malformed.
    """
    start = datetime.strptime(f"{movie.date} {movie.time}", "%Y-%m-%d %H:%M")
    return start, start + timedelta(minutes=movie.duration)


def _spans_intersect(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def overlaps(candidate: Movie, existing: Iterable[Movie]) -> bool:
    """
    True if `candidate` overlaps any movie in `existing` on the same hall.

    A movie with the same id as the candidate is ignored, so re-placing an
    already stored movie does not collide with itself.
    """
    c_start, c_end = movie_span(candidate)
    for other in existing:
        if candidate.id is not None and other.id == candidate.id:
            continue
        if other.hall != candidate.hall:
            continue
        o_start, o_end = movie_span(other)
        if _spans_intersect(c_start, c_end, o_start, o_end):
            return True
    return False


def find_conflicts(movies: Iterable[Movie]) -> list[tuple[Movie, Movie]]:
    """
    Find overlapping pairs (A, B), each pair once, A starting no later than B.
    """
    conflicts: list[tuple[Movie, Movie]] = []

    # Pre-parse spans; malformed movies cannot conflict
    parsed: list[tuple[datetime, datetime, Movie]] = []
    for m in movies:
        try:
            start, end = movie_span(m)
        except ValueError:
            continue
        parsed.append((start, end, m))
    parsed.sort(key=lambda item: (item[0], item[2].hall))

    # O(n^2) is fine for one cinema's programme
    for i in range(len(parsed)):
        s1, e1, m1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            s2, e2, m2 = parsed[j]
            if m1.hall != m2.hall:
                continue
            if m1.id is not None and m1.id == m2.id:
                continue
            if _spans_intersect(s1, e1, s2, e2):
                conflicts.append((m1, m2))

    return conflicts
