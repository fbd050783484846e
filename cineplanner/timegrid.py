"""
Time-grid generation.

A day is split into uniform slots of SLOT_MINUTES, labelled 'HH:MM'.
The visible window is a contiguous sub-range of those labels.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from cineplanner.config import MINUTES_PER_DAY, SLOT_MINUTES

logger = logging.getLogger(__name__)

# Recovery window used when the configured bounds cannot be resolved.
DEFAULT_WINDOW_FIRST = "09:00"
DEFAULT_WINDOW_LAST = "23:45"


def _label(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def all_day_slots() -> list[str]:
    """
    Return every slot label of a full day: 00:00, 00:15, ..., 23:45 (96 entries).
    """
    return [_label(m) for m in range(0, MINUTES_PER_DAY, SLOT_MINUTES)]


def slot_index(label: str, all_slots: Sequence[str]) -> Optional[int]:
    """
    Position of `label` in `all_slots`, or None if it is not a slot start.
    """
    try:
        return list(all_slots).index(label)
    except ValueError:
        return None


def _hour_index(hour: object, all_slots: Sequence[str], allow_end_of_day: bool) -> Optional[int]:
    if not isinstance(hour, int) or isinstance(hour, bool):
        return None
    if allow_end_of_day and hour == 24:
        return len(all_slots)
    return slot_index(f"{hour:02d}:00", all_slots)


def _default_window(all_slots: Sequence[str]) -> list[str]:
    slots = list(all_slots)
    first = slot_index(DEFAULT_WINDOW_FIRST, slots)
    last = slot_index(DEFAULT_WINDOW_LAST, slots)
    if first is None or last is None:
        return slots
    return slots[first : last + 1]


def visible_slots(start_hour: object, end_hour: object, all_slots: Sequence[str]) -> list[str]:
    """
    Return the slots from `start_hour`:00 (inclusive) up to `end_hour`:00
    (exclusive); end_hour == 24 means up to the end of the day.

    Example: (9, 23) -> 09:00 .. 22:45 (56 slots).

    Recovery path: if a bound does not resolve to a slot, or the window is
    empty, the default window 09:00 .. 23:45 is returned and a warning is
    logged. Validate settings with config.validate_window before relying on
    this.
    """
    start_index = _hour_index(start_hour, all_slots, allow_end_of_day=False)
    end_index = _hour_index(end_hour, all_slots, allow_end_of_day=True)

    if start_index is None or end_index is None or start_index >= end_index:
        logger.warning(
            "Invalid visible window start_hour=%r end_hour=%r, using %s-%s",
            start_hour,
            end_hour,
            DEFAULT_WINDOW_FIRST,
            DEFAULT_WINDOW_LAST,
        )
        return _default_window(all_slots)

    return list(all_slots)[start_index:end_index]


def header_slots(visible: Sequence[str]) -> list[str]:
    """
    Labels that get a column header: full and half hours only.
    """
    return [t for t in visible if t.endswith(":00") or t.endswith(":30")]
