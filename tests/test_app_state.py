from datetime import date

import pytest

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

TODAY = date(2025, 6, 1)


def _contact(id, name, date_, type_="Birthday", today=TODAY):
    return annotate_record({"id": id, "name": name, "date": date_, "type": type_}, today)


def _loaded():
    contacts = process_contacts([
        {"id": "1", "name": "Ana", "date": "2000-06-10", "type": "Birthday"},
        {"id": "2", "name": "Ben", "date": "2000-06-02", "type": "Anniversary"},
    ], TODAY)
    return load_contacts(AppState(), contacts, TODAY)


def test_fresh_state_is_stale():
    assert is_stale(AppState(), TODAY)


def test_loaded_state_is_stale_the_next_day():
    state = _loaded()
    assert not is_stale(state, TODAY)
    assert is_stale(state, date(2025, 6, 2))


def test_add_keeps_order_and_leaves_original_alone():
    state = _loaded()
    new_state = add_contact(state, _contact("3", "Cal", "1999-06-01"))
    assert [c.id for c in new_state.contacts] == ["3", "2", "1"]
    assert [c.id for c in state.contacts] == ["2", "1"]


def test_replace_resorts():
    state = replace_contact(_loaded(), _contact("1", "Ana", "2000-06-01"))
    assert [(c.id, c.days_remaining) for c in state.contacts] == [("1", 0), ("2", 1)]


def test_replace_and_remove_unknown_raise_key_error():
    state = _loaded()
    with pytest.raises(KeyError):
        replace_contact(state, _contact("99", "Nobody", "2000-01-01"))
    with pytest.raises(KeyError):
        remove_contact(state, "99")


def test_remove():
    assert [c.id for c in remove_contact(_loaded(), "2").contacts] == ["1"]


def test_filter_and_search_do_not_touch_cached_list():
    state = set_search(set_filter(_loaded(), "anniversary"), "be")
    assert [c.id for c in visible_contacts(state)] == ["2"]
    assert len(state.contacts) == 2

    state = set_filter(state, "")
    assert state.kind_filter == "all"
    assert [c.id for c in visible_contacts(set_search(state, ""))] == ["2", "1"]
