"""
Load a spreadsheet export (CSV) into the contacts store.

Usage:
    python import_contacts.py contacts.csv [user_id]

The CSV needs a header row with the columns `name, reference, phone, date,
type` (extra columns are ignored, `id` is always assigned by the store).
Rows are cleaned the same way the list assembler cleans them; rows that
would never show up in the list (missing fields, unreadable dates) are
skipped and reported instead of imported.
"""

import csv
import sys
from typing import Dict, Iterable, List, Tuple

from assembler import normalize_record
from dates import is_canonical, normalize_date_string
from errors import ContactError, DateParseError
from recurrence import parse_month_day
from repo_contacts import ContactRepo
from settings import settings


def clean_row(raw: Dict[str, str]) -> Dict[str, str]:
    """Validate one CSV row and return it with a canonical date.

    Raises a `ContactError` subclass for rows that cannot be imported.
    """

    record = normalize_record(raw)
    record.pop("id")
    record["date"] = normalize_date_string(record["date"])
    if not is_canonical(record["date"]):
        raise DateParseError(f"Unrecognized date: {record['date']!r}")
    parse_month_day(record["date"])
    return record


def split_rows(rows: Iterable[Dict[str, str]]) -> Tuple[List[Dict[str, str]], List[Tuple[int, str]]]:
    """Separate importable rows from rejected ones.

    Rejections are (line number, reason); line 1 is the header.
    """

    good: List[Dict[str, str]] = []
    rejected: List[Tuple[int, str]] = []
    for line_no, raw in enumerate(rows, start=2):
        try:
            good.append(clean_row(raw))
        except ContactError as e:
            rejected.append((line_no, str(e)))
    return good, rejected


def main(csv_path: str, user_id: str):
    print(f"Importing contacts for {user_id} from: {csv_path}")
    repo = ContactRepo()

    with open(csv_path, newline="", encoding="utf-8-sig") as fh:
        good, rejected = split_rows(csv.DictReader(fh))

    total_inserted = 0
    batch_size = max(1, settings.max_import_batch)
    for start in range(0, len(good), batch_size):
        total_inserted += repo.insert_contacts(user_id, good[start:start + batch_size])
        print(f"Inserted {total_inserted} contacts...")

    for line_no, reason in rejected:
        print(f"  Skipped line {line_no}: {reason}")
    print(f"Done. Inserted {total_inserted}, skipped {len(rejected)}.")
    return total_inserted


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python import_contacts.py /path/to/contacts.csv [user_id]")
        sys.exit(1)
    main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else settings.default_user)
