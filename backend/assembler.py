"""
List assembly: raw store rows -> annotated, sorted reminder entries.

The store hands back rows whose fields may be missing, padded with
whitespace or typed loosely (numbers, timestamps). Each row is cleaned,
its date normalized and its next occurrence computed for `today`. A row
that fails any of these steps is logged and left out; one bad row never
keeps the rest of the list from showing.

Sorting and filtering are separate passes that return new lists, so the
cached list stays untouched while the user narrows the view.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List

from dates import is_canonical, normalize_date_string
from display import days_label
from errors import ContactError, ContactValidationError, DateParseError
from messaging import whatsapp_link
from models import ContactOut
from recurrence import next_occurrence

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("id", "name", "reference", "phone", "date", "type")
REQUIRED_FIELDS = ("name", "date", "type")


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def normalize_record(raw: Dict[str, Any]) -> Dict[str, str]:
    """Trim every known field and coerce missing values to "".

    Raises `ContactValidationError` when name, date or type ends up empty.
    """

    record = {field: _text(raw.get(field)) for field in RECORD_FIELDS}
    missing = [f for f in REQUIRED_FIELDS if not record[f]]
    if missing:
        raise ContactValidationError(f"Missing required field(s): {', '.join(missing)}")
    return record


def annotate_record(raw: Dict[str, Any], today: date | None = None) -> ContactOut:
    """Validate one raw row and attach its next occurrence for `today`."""

    record = normalize_record(raw)
    # Stores may hand back date objects; normalize before stringifying.
    record["date"] = normalize_date_string(raw.get("date"))
    if not is_canonical(record["date"]):
        raise DateParseError(f"Unrecognized date: {record['date']!r}")

    occ = next_occurrence(record["date"], today)
    return ContactOut(
        **record,
        next_occurrence=occ.next_occurrence,
        days_remaining=occ.days_remaining,
        days_label=days_label(occ.days_remaining),
        message_link=whatsapp_link(record["phone"], record["type"], record["name"]),
    )


def sort_by_days_remaining(contacts: Iterable[ContactOut]) -> List[ContactOut]:
    """Return a new list ordered by days remaining; ties keep input order."""

    return sorted(contacts, key=lambda c: c.days_remaining)


def process_contacts(raw_records, today: date | None = None) -> List[ContactOut]:
    """Annotate every valid row and return them soonest first.

    Invalid rows are dropped. Raises `TypeError` only when `raw_records`
    itself is not a list or tuple.
    """

    if not isinstance(raw_records, (list, tuple)):
        raise TypeError(
            f"Expected a list of contact records, got {type(raw_records).__name__}"
        )
    if today is None:
        today = date.today()

    out: List[ContactOut] = []
    for raw in raw_records:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-mapping contact record: %r", raw)
            continue
        try:
            out.append(annotate_record(raw, today))
        except ContactError as e:
            logger.warning("Skipping contact %r: %s", raw.get("id"), e)
    return sort_by_days_remaining(out)


def filter_contacts(contacts: Iterable[ContactOut], kind: str = "all", query: str = "") -> List[ContactOut]:
    """Narrow a list by occasion kind and free-text search.

    `kind` is "all" or a type label compared case-insensitively. `query`
    matches case-insensitively against the name or the reference note.
    """

    filtered = list(contacts)

    kind = (kind or "all").strip().lower()
    if kind != "all":
        filtered = [c for c in filtered if c.type.lower() == kind]

    q = (query or "").strip().lower()
    if q:
        filtered = [
            c for c in filtered
            if q in c.name.lower() or q in c.reference.lower()
        ]
    return filtered
