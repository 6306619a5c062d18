"""
Per-user list state.

`AppState` holds everything the upcoming-events view depends on: the
annotated, sorted reminder list, the active type filter, the search text
and the day the list was computed for. It is immutable; every update
function takes a state and returns a new one, so the list logic can be
exercised without any HTTP or rendering machinery.
"""

from dataclasses import dataclass, replace
from datetime import date

from models import ContactOut
from assembler import filter_contacts, sort_by_days_remaining


@dataclass(frozen=True)
class AppState:
    contacts: tuple[ContactOut, ...] = ()
    kind_filter: str = "all"
    search_query: str = ""
    computed_on: date | None = None


def is_stale(state: AppState, today: date) -> bool:
    """True when the list was never loaded or was computed on another day."""

    return state.computed_on is None or state.computed_on != today


def load_contacts(state: AppState, contacts, today: date) -> AppState:
    """Replace the cached list with freshly assembled contacts."""

    return replace(
        state,
        contacts=tuple(sort_by_days_remaining(contacts)),
        computed_on=today,
    )


def add_contact(state: AppState, contact: ContactOut) -> AppState:
    return replace(state, contacts=tuple(sort_by_days_remaining([*state.contacts, contact])))


def replace_contact(state: AppState, contact: ContactOut) -> AppState:
    """Swap the entry with the same id. Raises KeyError if it is not cached."""

    contacts = list(state.contacts)
    for i, c in enumerate(contacts):
        if c.id == contact.id:
            contacts[i] = contact
            return replace(state, contacts=tuple(sort_by_days_remaining(contacts)))
    raise KeyError(contact.id)


def remove_contact(state: AppState, contact_id: str) -> AppState:
    """Drop the entry with `contact_id`. Raises KeyError if it is not cached."""

    remaining = tuple(c for c in state.contacts if c.id != contact_id)
    if len(remaining) == len(state.contacts):
        raise KeyError(contact_id)
    return replace(state, contacts=remaining)


def set_filter(state: AppState, kind: str) -> AppState:
    return replace(state, kind_filter=(kind or "all").strip() or "all")


def set_search(state: AppState, query: str) -> AppState:
    return replace(state, search_query=query or "")


def visible_contacts(state: AppState) -> list[ContactOut]:
    """The cached list narrowed by the state's filter and search text."""

    return filter_contacts(state.contacts, state.kind_filter, state.search_query)
