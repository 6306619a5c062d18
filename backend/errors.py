"""
Error types raised while turning stored rows into reminder entries.

All record-level problems derive from `ContactError`, itself a `ValueError`,
so route handlers can keep mapping `ValueError` to HTTP 400. The list
assembler catches `ContactError` per record and drops the offending row.
"""


class ContactError(ValueError):
    """Base class for problems with a single contact record."""


class ContactValidationError(ContactError):
    """A required field (name, date or type) is empty."""


class DateParseError(ContactError):
    """The stored date could not be normalized to `YYYY-MM-DD`."""


class InvalidDateError(ContactError):
    """A canonical-looking date has non-numeric or impossible components."""


class ContactNotFoundError(KeyError):
    """Update or delete targeted an id the store does not know."""
