"""
Date normalization for stored occasion dates.

Rows coming back from the store are not guaranteed to hold a clean
`YYYY-MM-DD` string: spreadsheet exports may contain ISO timestamps,
slash-separated dates or text like "28 January 2000". Everything in the
recurrence code works on the canonical `YYYY-MM-DD` form produced here.

The calendar day must never move because of a timezone conversion, so
timestamps are cut at the date part instead of being parsed, and the
generic fallback reads UTC fields only.
"""

import re
from datetime import date, datetime, timezone

from dateutil import parser as date_parser

CANONICAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
ISO_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})", re.ASCII)
YEAR_FIRST_RE = re.compile(r"^(\d{4})[/\s-]+(\d{1,2})[/\s-]+(\d{1,2})$", re.ASCII)
DAY_FIRST_RE = re.compile(r"^(\d{1,2})[/\s-]+(\d{1,2})[/\s-]+(\d{4})$", re.ASCII)
TEXT_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s+(\d{4})$", re.ASCII)

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

# Fills fields the generic parser cannot find (e.g. "January 2000" -> day 1).
_PARSE_DEFAULT = datetime(2000, 1, 1)


def _fmt(year, month, day) -> str:
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def month_from_name(token: str) -> int | None:
    """Return the 1-based month for an English month name, or None.

    Full names (and anything starting with one) match, as do prefixes of at
    least three letters such as "Jan" or "Sept".
    """

    token = token.lower()
    for idx, name in enumerate(MONTH_NAMES, start=1):
        if token.startswith(name):
            return idx
        if len(token) >= 3 and name.startswith(token):
            return idx
    return None


def normalize_date_string(value) -> str:
    """Convert a loosely formatted date into `YYYY-MM-DD`.

    Returns "" for empty input and the (trimmed) input itself when no known
    format matches; callers treat a non-canonical result as unparseable.
    Never raises.
    """

    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return _fmt(value.year, value.month, value.day)
    if isinstance(value, date):
        return _fmt(value.year, value.month, value.day)

    s = str(value).strip()
    if not s:
        return ""

    if CANONICAL_RE.match(s):
        return s

    if "T" in s:
        m = ISO_PREFIX_RE.match(s)
        if m:
            return f"{m.group(1)}-{m.group(2)}-{m.group(3)}"

    m = YEAR_FIRST_RE.match(s)
    if m:
        return _fmt(m.group(1), m.group(2), m.group(3))

    # Day-first: 01/02/2000 is 1 February, never 2 January.
    m = DAY_FIRST_RE.match(s)
    if m:
        return _fmt(m.group(3), m.group(2), m.group(1))

    m = TEXT_RE.match(s)
    if m:
        month = month_from_name(m.group(2))
        if month is not None:
            return _fmt(m.group(3), month, m.group(1))

    try:
        parsed = date_parser.parse(s, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError):
        return s
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return _fmt(parsed.year, parsed.month, parsed.day)


def is_canonical(value: str) -> bool:
    return bool(value) and CANONICAL_RE.match(value) is not None
