"""
Today/tomorrow notifications.

A reminder whose occasion is today or tomorrow produces one notification
per calendar day and per days-remaining value: "tomorrow" on the eve and
"today" on the day itself, each shown once no matter how often the list
is reloaded. Which notifications were already handed out is tracked in a
`NotificationLedger`.

The ledger keeps a process-local set of marks behind a lock. When it is
given a store (`ContactRepo`), every new mark is also claimed there, so
marks survive restarts and are shared between worker processes; the
store's claim is the one that decides. Marks older than the retention
window are pruned at most once per day.
"""

import logging
import threading
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from models import ContactOut, NotificationOut
from settings import settings

logger = logging.getLogger(__name__)

NOTIFY_DAYS = (0, 1)

LedgerKey = Tuple[str, str, int, date]


class NotificationLedger:
    """Remembers which (user, contact, days_remaining, day) were notified."""

    def __init__(self, store=None, retention_days: int | None = None):
        self.store = store
        self.retention_days = (
            settings.notification_ledger_days if retention_days is None else retention_days
        )
        self._shown: Dict[LedgerKey, date] = {}
        self._lock = threading.Lock()
        self._pruned_on: date | None = None

    def has_shown(self, user_id: str, contact_id: str, days_remaining: int, today: date) -> bool:
        with self._lock:
            return (user_id, contact_id, days_remaining, today) in self._shown

    def claim(self, user_id: str, contact_id: str, days_remaining: int, today: date) -> bool:
        """Mark a notification as shown. True only for the first caller."""

        key = (user_id, contact_id, days_remaining, today)
        with self._lock:
            if key in self._shown:
                return False
            first = True
            if self.store is not None:
                first = self.store.claim_notification(user_id, contact_id, days_remaining, today)
            self._shown[key] = today
            self._prune_locked(today)
            return first

    def mark_shown(self, user_id: str, contact_id: str, days_remaining: int, today: date) -> None:
        self.claim(user_id, contact_id, days_remaining, today)

    def prune(self, today: date) -> int:
        """Forget entries older than the retention window. Returns how many."""

        with self._lock:
            self._pruned_on = None
            return self._prune_locked(today)

    def _prune_locked(self, today: date) -> int:
        if self._pruned_on == today:
            return 0
        self._pruned_on = today
        cutoff = today - timedelta(days=self.retention_days)
        stale = [k for k, shown_on in self._shown.items() if shown_on < cutoff]
        for k in stale:
            del self._shown[k]
        if self.store is not None:
            self.store.prune_notifications(cutoff)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._shown)


def _emoji(kind: str) -> str:
    kind = kind.lower()
    if kind == "birthday":
        return "🎂"
    if kind == "anniversary":
        return "💍"
    return "🎉"


def build_notification(contact: ContactOut) -> NotificationOut:
    """Title/body/tag for a contact due today or tomorrow."""

    is_today = contact.days_remaining == 0
    day_text = "Today" if is_today else "Tomorrow"
    title = f"{_emoji(contact.type)} {day_text}: {contact.name}'s {contact.type}"
    if is_today:
        body = f"Don't forget to wish {contact.name} a happy {contact.type}!"
    else:
        body = f"{contact.name}'s {contact.type} is tomorrow!"
    return NotificationOut(
        contact_id=contact.id,
        days_remaining=contact.days_remaining,
        title=title,
        body=body,
        tag=f"birthday_{contact.id}_{contact.days_remaining}",
    )


def collect_due(
    user_id: str,
    contacts: Iterable[ContactOut],
    ledger: NotificationLedger,
    today: date,
    enabled: bool = True,
) -> List[NotificationOut]:
    """Return notifications not yet shown today and mark them as shown."""

    if not enabled:
        return []

    out: List[NotificationOut] = []
    for c in contacts:
        if c.days_remaining not in NOTIFY_DAYS:
            continue
        if ledger.claim(user_id, c.id, c.days_remaining, today):
            out.append(build_notification(c))

    if out:
        logger.info("Issuing %d notification(s) for %s", len(out), user_id)
    return out
