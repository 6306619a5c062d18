"""
Service / facade layer.

This module implements the business rules around reminders. It is free of
SQL: it calls `ContactRepo` for every store operation. All read and write
paths go through this service so the list cache, the recurrence values
and the notification ledger stay consistent.

Key responsibilities:
- assemble the upcoming-events list (validate, annotate, sort, filter)
- keep one `AppState` per user and never serve a list computed on an
  earlier day
- apply creates/edits/deletes to the store first, then to the cache
- decide which today/tomorrow notifications are due

FastAPI runs the sync routes in a threadpool, so one service instance is
used from several threads at once. Every read-modify-write of the per-user
cache happens under `self._lock`. Notification marks and the notification
preference live in the store, not in this object, so they survive a
restart and are shared by every worker process.
"""

import logging
import threading
from datetime import date
from typing import Callable, Dict, List

from app_state import (
    AppState,
    add_contact,
    is_stale,
    load_contacts,
    remove_contact,
    replace_contact,
    set_filter,
    set_search,
    visible_contacts,
)
from assembler import annotate_record, process_contacts
from errors import ContactNotFoundError
from models import ContactIn, ContactOut, NotificationOut
from notifications import NotificationLedger, collect_due
from repo_contacts import ContactRepo

logger = logging.getLogger(__name__)


class ContactService:
    """Business rules + caching around the contact store.

    Example usage:
        repo = ContactRepo()
        svc = ContactService(repo)
        svc.list_upcoming('alice', kind='birthday')

    `clock` returns "today"; it is `date.today` unless a caller pins it.
    """

    def __init__(
        self,
        repo: ContactRepo,
        ledger: NotificationLedger | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.repo = repo
        self.ledger = ledger if ledger is not None else NotificationLedger(store=repo)
        self._clock = clock
        self._states: Dict[str, AppState] = {}
        self._lock = threading.RLock()

    def state_for(self, user_id: str, today: date | None = None, refresh: bool = False) -> AppState:
        """Return the user's list state, reloading it from the store if stale."""

        today = today or self._clock()
        with self._lock:
            state = self._states.get(user_id, AppState())
            if refresh or is_stale(state, today):
                raw = self.repo.fetch_contacts(user_id)
                state = load_contacts(state, process_contacts(raw, today), today)
                self._states[user_id] = state
            return state

    def list_upcoming(
        self,
        user_id: str,
        kind: str = "all",
        query: str = "",
        today: date | None = None,
        refresh: bool = False,
    ) -> List[ContactOut]:
        """Annotated reminders for `user_id`, soonest first, narrowed by kind/query."""

        with self._lock:
            state = self.state_for(user_id, today, refresh)
            state = set_search(set_filter(state, kind), query)
            self._states[user_id] = state
        return visible_contacts(state)

    def create_contact(self, user_id: str, contact: ContactIn, today: date | None = None) -> ContactOut:
        today = today or self._clock()
        with self._lock:
            state = self.state_for(user_id, today)
            new_id = self.repo.insert_contact(user_id, contact)
            entry = annotate_record({"id": new_id, **contact.model_dump()}, today)
            self._states[user_id] = add_contact(state, entry)
        return entry

    def update_contact(
        self, user_id: str, contact_id: str, contact: ContactIn, today: date | None = None
    ) -> ContactOut:
        """Full replace of the editable fields; the id never changes."""

        today = today or self._clock()
        with self._lock:
            state = self.state_for(user_id, today)
            if not self.repo.update_contact(user_id, contact_id, contact):
                raise ContactNotFoundError(contact_id)
            entry = annotate_record({"id": contact_id, **contact.model_dump()}, today)
            try:
                self._states[user_id] = replace_contact(state, entry)
            except KeyError:
                # Row exists in the store but not in the cache (e.g. another session).
                self.state_for(user_id, today, refresh=True)
        return entry

    def delete_contact(self, user_id: str, contact_id: str, today: date | None = None) -> None:
        today = today or self._clock()
        with self._lock:
            state = self.state_for(user_id, today)
            if not self.repo.delete_contact(user_id, contact_id):
                raise ContactNotFoundError(contact_id)
            try:
                self._states[user_id] = remove_contact(state, contact_id)
            except KeyError:
                self.state_for(user_id, today, refresh=True)

    def due_notifications(self, user_id: str, today: date | None = None) -> List[NotificationOut]:
        """Notifications for today/tomorrow that this user has not seen yet today."""

        today = today or self._clock()
        state = self.state_for(user_id, today)
        return collect_due(
            user_id,
            state.contacts,
            self.ledger,
            today,
            enabled=self.notifications_enabled(user_id),
        )

    def notifications_enabled(self, user_id: str) -> bool:
        stored = self.repo.get_notification_preference(user_id)
        return True if stored is None else stored

    def set_notification_preference(self, user_id: str, enabled: bool) -> bool:
        self.repo.set_notification_preference(user_id, enabled)
        logger.info("Notifications %s for %s", "enabled" if enabled else "disabled", user_id)
        return enabled

    def health_check(self) -> None:
        """Perform a lightweight store ping via the repository."""

        self.repo.ping()
