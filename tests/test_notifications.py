import threading
from datetime import date, timedelta

from assembler import process_contacts
from notifications import NotificationLedger, build_notification, collect_due

TODAY = date(2025, 5, 20)


def _contacts(today=TODAY):
    return process_contacts([
        {"id": "1", "name": "Ana", "date": "1990-05-20", "type": "Birthday"},
        {"id": "2", "name": "Ben & Cy", "date": "2015-05-21", "type": "Anniversary"},
        {"id": "3", "name": "Dee", "date": "1990-05-21", "type": "Graduation"},
        {"id": "4", "name": "Eve", "date": "1990-05-25", "type": "Birthday"},
    ], today)


def test_build_notification_texts():
    today_c, tomorrow_c, custom_c, _ = _contacts()
    n = build_notification(today_c)
    assert n.title == "🎂 Today: Ana's Birthday"
    assert n.body == "Don't forget to wish Ana a happy Birthday!"
    assert n.tag == "birthday_1_0"

    n = build_notification(tomorrow_c)
    assert n.title == "💍 Tomorrow: Ben & Cy's Anniversary"
    assert n.body == "Ben & Cy's Anniversary is tomorrow!"

    assert build_notification(custom_c).title.startswith("🎉 Tomorrow")


def test_only_today_and_tomorrow_once_per_day():
    ledger = NotificationLedger()
    first = collect_due("u", _contacts(), ledger, TODAY)
    assert [n.contact_id for n in first] == ["1", "2", "3"]
    assert collect_due("u", _contacts(), ledger, TODAY) == []


def test_same_contact_notifies_again_when_day_count_changes():
    ledger = NotificationLedger()
    collect_due("u", _contacts(), ledger, TODAY)
    tomorrow = TODAY + timedelta(days=1)
    again = collect_due("u", _contacts(tomorrow), ledger, tomorrow)
    assert [(n.contact_id, n.days_remaining) for n in again] == [("2", 0), ("3", 0)]


def test_ledger_is_per_user():
    ledger = NotificationLedger()
    collect_due("u", _contacts(), ledger, TODAY)
    assert len(collect_due("other", _contacts(), ledger, TODAY)) == 3


def test_disabled_preference_suppresses_everything():
    ledger = NotificationLedger()
    assert collect_due("u", _contacts(), ledger, TODAY, enabled=False) == []
    assert len(ledger) == 0


def test_ledger_prunes_old_entries():
    ledger = NotificationLedger(retention_days=7)
    ledger.mark_shown("u", "1", 0, TODAY - timedelta(days=10))
    ledger.mark_shown("u", "1", 0, TODAY - timedelta(days=3))
    assert len(ledger) == 2
    ledger.mark_shown("u", "2", 1, TODAY)
    assert len(ledger) == 2
    assert not ledger.has_shown("u", "1", 0, TODAY - timedelta(days=10))


def test_claim_is_true_only_once():
    ledger = NotificationLedger()
    assert ledger.claim("u", "1", 0, TODAY)
    assert not ledger.claim("u", "1", 0, TODAY)
    assert ledger.has_shown("u", "1", 0, TODAY)


def test_concurrent_collect_due_issues_each_notification_once():
    ledger = NotificationLedger()
    for day in range(1, 40):
        ledger.mark_shown("seed", "x", 0, TODAY - timedelta(days=day))
    contacts = _contacts()
    barrier = threading.Barrier(16)
    issued = []
    errors = []

    def worker():
        try:
            barrier.wait()
            for _ in range(50):
                issued.extend(collect_due("u", contacts, ledger, TODAY))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(n.contact_id for n in issued) == ["1", "2", "3"]


def test_store_decides_across_ledgers(repo):
    first = NotificationLedger(store=repo)
    second = NotificationLedger(store=repo)
    assert [n.contact_id for n in collect_due("u", _contacts(), first, TODAY)] == ["1", "2", "3"]
    assert collect_due("u", _contacts(), second, TODAY) == []


def test_store_marks_are_pruned_once_per_day(repo):
    ledger = NotificationLedger(store=repo, retention_days=7)
    ledger.mark_shown("u", "1", 0, TODAY - timedelta(days=10))
    ledger.mark_shown("u", "2", 0, TODAY)
    ledger.mark_shown("u", "3", 0, TODAY)
    assert repo.prune_calls == 2
    assert ("u", "1", 0, TODAY - timedelta(days=10)) not in repo.marks
    assert ("u", "2", 0, TODAY) in repo.marks
