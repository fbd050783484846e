"""
Exceptions shared across the planner.

- ValidationError: a movie is malformed and must not enter the schedule
- StoreError: the event store rejected a read/write
- ConfigError: schedule configuration is invalid
"""

from __future__ import annotations


class CinePlannerError(Exception):
    """Base class for all planner errors."""


class ValidationError(CinePlannerError):
    """
    Raised when a movie fails validation.

    `errors` maps field name -> human readable message, so the form layer can
    show the message next to the offending field.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        details = "; ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
        super().__init__(f"Invalid movie ({details})")


class StoreError(CinePlannerError):
    """Raised when the event store cannot complete an operation."""


class ConfigError(CinePlannerError):
    """Raised by explicit configuration checks."""
