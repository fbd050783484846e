"""
Week-window navigation.

Weeks start on Monday. The cursor is the only mutable piece; the helper
functions are plain date arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional, Union

DAYS_PER_WEEK = 7

DateLike = Union[date, datetime]


def _as_date(d: DateLike) -> date:
    # datetime is a date subclass, so check it first
    if isinstance(d, datetime):
        return d.date()
    return d


def monday_of(d: DateLike) -> date:
    """
    Return the Monday of the ISO week containing `d`.

    Sunday belongs to the week that started six days earlier.
    """
    day = _as_date(d)
    # isoweekday: Monday=1 .. Sunday=7
    return day - timedelta(days=day.isoweekday() - 1)


def week_dates(monday: DateLike) -> list[date]:
    """
    Return the seven dates starting at `monday`.
    """
    start = _as_date(monday)
    return [start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def parse_iso_date(s: str) -> date:
    """
    Parse 'YYYY-MM-DD'. Raises ValueError for anything else.
    """
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


@dataclass
class WeekCursor:
    """
    The week currently shown. Always points at a Monday.
    """

    start: date = field(default_factory=lambda: monday_of(date.today()))

    def __post_init__(self) -> None:
        self.start = monday_of(self.start)

    def previous_week(self) -> date:
        self.start = self.start - timedelta(days=DAYS_PER_WEEK)
        return self.start

    def next_week(self) -> date:
        self.start = self.start + timedelta(days=DAYS_PER_WEEK)
        return self.start

    def today(self, now: Optional[DateLike] = None) -> date:
        self.start = monday_of(now if now is not None else date.today())
        return self.start

    def dates(self) -> list[date]:
        return week_dates(self.start)
