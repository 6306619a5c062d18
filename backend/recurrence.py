"""
Annual recurrence of occasion dates.

Given a canonical `YYYY-MM-DD` occasion date, work out the next day on
which its month/day comes around again (today included) and how many days
away that is. Only month and day take part; the stored year is kept for
display. A Feb 29 occasion falls on Feb 28 in years without a leap day.
"""

import calendar
from datetime import date
from typing import NamedTuple

from errors import InvalidDateError

# Any leap year works; it only bounds the valid day-of-month range.
_LEAP_REFERENCE_YEAR = 2000


class Occurrence(NamedTuple):
    next_occurrence: date
    days_remaining: int


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def parse_month_day(date_string: str) -> tuple[int, int, int]:
    """Split a canonical date into (year, month, day).

    Raises `InvalidDateError` unless the string has exactly three numeric
    parts and month/day form a real calendar day (Feb 29 always allowed).
    """

    parts = (date_string or "").split("-")
    if len(parts) != 3:
        raise InvalidDateError(f"Invalid date format: {date_string!r}")
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidDateError(f"Invalid date values: {date_string!r}")

    year, month, day = (int(p) for p in parts)
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Month out of range: {date_string!r}")
    # Days past the end of the month (02-30, 04-31) are rejected, never
    # rolled over into the next month.
    if not 1 <= day <= calendar.monthrange(_LEAP_REFERENCE_YEAR, month)[1]:
        raise InvalidDateError(f"Day out of range: {date_string!r}")
    return year, month, day


def occurrence_in_year(year: int, month: int, day: int) -> date:
    """The occasion's date in `year`, with Feb 29 moved to Feb 28 when needed."""

    if month == 2 and day == 29 and not is_leap_year(year):
        return date(year, 2, 28)
    return date(year, month, day)


def next_occurrence(date_string: str, today: date | None = None) -> Occurrence:
    """Compute the next occurrence of a canonical date relative to `today`.

    `today` defaults to the local current date. An occasion falling on
    today gives `days_remaining == 0`.
    """

    _, month, day = parse_month_day(date_string)
    if today is None:
        today = date.today()

    candidate = occurrence_in_year(today.year, month, day)
    if candidate < today:
        candidate = occurrence_in_year(today.year + 1, month, day)

    return Occurrence(candidate, (candidate - today).days)
