"""
Repository: SQL operations for `contacts`, `notification_marks` and
`notification_prefs`.

This file contains only store interaction code. It maps Pydantic models
to SQL parameters and converts rows to plain Python dicts. Keep business
rules (validation, recurrence, sorting) out of this module.

Important notes:
- Rows are returned raw: `date` is whatever text the store holds, which
  may be any of the loose formats the date normalizer understands.
- Every write commits before returning; callers expect the change to be
  durable after the method returns.
- All statements are scoped by `user_id`; one user never sees or changes
  another user's rows. The one exception is pruning expired notification
  marks, which is a retention sweep over all users.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from db import get_conn
from models import ContactIn

COLUMNS = ("id", "name", "reference", "phone", "date", "type")


class ContactRepo:
    """Store access only. No business logic here."""

    def fetch_contacts(self, user_id: str) -> List[Dict[str, Any]]:
        """Return every contact row for `user_id` in insertion order."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT id, name, reference, phone, date, type "
                    "FROM contacts WHERE user_id=%s ORDER BY id",
                    (user_id,),
                )
                out: List[Dict[str, Any]] = []
                for r in cur.fetchall():
                    row = dict(zip(COLUMNS, r))
                    row["id"] = str(row["id"])
                    out.append(row)
                return out

    def insert_contact(self, user_id: str, contact: ContactIn) -> str:
        """Insert one contact and return its new id."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO contacts (user_id, name, reference, phone, date, type) "
                    "VALUES (%s, %s, %s, %s, %s, %s) RETURNING id",
                    (user_id, contact.name, contact.reference, contact.phone, contact.date, contact.type),
                )
                new_id = cur.fetchone()[0]
            conn.commit()
        return str(new_id)

    def insert_contacts(self, user_id: str, rows: Iterable[Dict[str, str]]) -> int:
        """Batch-insert already-cleaned rows. Returns the number inserted."""

        params = [
            (user_id, r["name"], r.get("reference", ""), r.get("phone", ""), r["date"], r["type"])
            for r in rows
        ]
        if not params:
            return 0
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.executemany(
                    "INSERT INTO contacts (user_id, name, reference, phone, date, type) "
                    "VALUES (%s, %s, %s, %s, %s, %s)",
                    params,
                )
            conn.commit()
        return len(params)

    def update_contact(self, user_id: str, contact_id: str, contact: ContactIn) -> bool:
        """Replace the editable fields of one contact. False if no such row."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE contacts SET name=%s, reference=%s, phone=%s, date=%s, type=%s "
                    "WHERE user_id=%s AND id::text=%s",
                    (contact.name, contact.reference, contact.phone, contact.date, contact.type,
                     user_id, contact_id),
                )
                updated = cur.rowcount
            conn.commit()
        return updated > 0

    def delete_contact(self, user_id: str, contact_id: str) -> bool:
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM contacts WHERE user_id=%s AND id::text=%s",
                    (user_id, contact_id),
                )
                deleted = cur.rowcount
            conn.commit()
        return deleted > 0

    def claim_notification(self, user_id: str, contact_id: str, days_remaining: int, shown_on: date) -> bool:
        """Record a shown notification. True only if it was not recorded before.

        The primary key makes this atomic across connections and processes.
        """

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO notification_marks (user_id, contact_id, days_remaining, shown_on) "
                    "VALUES (%s, %s, %s, %s) ON CONFLICT DO NOTHING RETURNING 1",
                    (user_id, contact_id, days_remaining, shown_on),
                )
                inserted = cur.fetchone() is not None
            conn.commit()
        return inserted

    def prune_notifications(self, before: date) -> int:
        """Delete marks shown before `before`. Returns the number removed."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM notification_marks WHERE shown_on < %s", (before,))
                deleted = cur.rowcount
            conn.commit()
        return deleted

    def get_notification_preference(self, user_id: str) -> Optional[bool]:
        """Stored preference, or None if the user never chose one."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT enabled FROM notification_prefs WHERE user_id=%s",
                    (user_id,),
                )
                row = cur.fetchone()
        return None if row is None else bool(row[0])

    def set_notification_preference(self, user_id: str, enabled: bool) -> None:
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO notification_prefs (user_id, enabled) VALUES (%s, %s) "
                    "ON CONFLICT (user_id) DO UPDATE SET enabled = EXCLUDED.enabled",
                    (user_id, enabled),
                )
            conn.commit()

    def ping(self) -> None:
        """Lightweight store health check. Raises on error."""

        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
