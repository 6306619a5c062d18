import itertools
import threading
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Fixed "today" for the service and API fixtures, so no test depends on
# the wall clock or breaks when run across midnight.
TODAY = date(2025, 6, 15)


class FakeContactRepo:
    """In-memory stand-in for `ContactRepo` with the same method surface."""

    def __init__(self, rows=None):
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.rows = {}
        self.marks = set()
        self.prefs = {}
        self.fetch_calls = 0
        self.prune_calls = 0
        for row in rows or []:
            self.add_raw(row.pop("user_id", "demo"), row)

    def add_raw(self, user_id, row):
        row = dict(row)
        if not row.get("id"):
            row["id"] = str(next(self._ids))
        self.rows[row["id"]] = (user_id, row)
        return row["id"]

    def fetch_contacts(self, user_id):
        self.fetch_calls += 1
        return [dict(row) for uid, row in self.rows.values() if uid == user_id]

    def insert_contact(self, user_id, contact):
        return self.add_raw(user_id, contact.model_dump())

    def insert_contacts(self, user_id, rows):
        n = 0
        for r in rows:
            self.add_raw(user_id, r)
            n += 1
        return n

    def update_contact(self, user_id, contact_id, contact):
        current = self.rows.get(contact_id)
        if current is None or current[0] != user_id:
            return False
        self.rows[contact_id] = (user_id, {"id": contact_id, **contact.model_dump()})
        return True

    def delete_contact(self, user_id, contact_id):
        current = self.rows.get(contact_id)
        if current is None or current[0] != user_id:
            return False
        del self.rows[contact_id]
        return True

    def claim_notification(self, user_id, contact_id, days_remaining, shown_on):
        key = (user_id, contact_id, days_remaining, shown_on)
        with self._lock:
            if key in self.marks:
                return False
            self.marks.add(key)
            return True

    def prune_notifications(self, before):
        with self._lock:
            self.prune_calls += 1
            stale = {k for k in self.marks if k[3] < before}
            self.marks -= stale
            return len(stale)

    def get_notification_preference(self, user_id):
        return self.prefs.get(user_id)

    def set_notification_preference(self, user_id, enabled):
        self.prefs[user_id] = enabled

    def ping(self):
        return None


@pytest.fixture
def repo():
    return FakeContactRepo()


@pytest.fixture
def svc(repo):
    from service_contacts import ContactService
    return ContactService(repo, clock=lambda: TODAY)


@pytest.fixture
def client(svc, monkeypatch):
    import main
    monkeypatch.setattr(main, "svc", svc)
    with TestClient(main.app) as c:
        yield c
