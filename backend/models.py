"""
Pydantic models used across the backend.

`ContactIn` is the input shape for create and full-replace edits; it is
validated at the FastAPI route boundary. `ContactOut` is an annotated
reminder entry: the stored fields plus values derived for "today", which
are never written back to the store.

Guidelines:
- Keep input models minimal. Derived fields belong on `ContactOut` only.
- `id` is assigned by the store and never accepted from clients.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dates import is_canonical, normalize_date_string
from recurrence import parse_month_day


class ContactIn(BaseModel):
        """Input shape for a reminder sent by clients.

        Fields:
        - `name`: display name, required.
        - `date`: occasion date. Loose formats are accepted and stored in
          canonical `YYYY-MM-DD` form.
        - `type`: `Birthday`, `Anniversary` or any custom label, required.
        - `phone`: optional number used for the messaging link.
        - `reference`: optional free-text note.
        """

        name: str
        date: str
        type: str
        phone: str = ""
        reference: str = ""

        @field_validator("name", "type")
        @classmethod
        def _required_text(cls, v: str, info) -> str:
            v = (v or "").strip()
            if not v:
                raise ValueError(f"{info.field_name.capitalize()} is required")
            return v

        @field_validator("phone", "reference", mode="before")
        @classmethod
        def _optional_text(cls, v) -> str:
            return "" if v is None else str(v).strip()

        @field_validator("date", mode="before")
        @classmethod
        def _canonical_date(cls, v) -> str:
            normalized = normalize_date_string(v)
            if not normalized:
                raise ValueError("Date is required")
            if not is_canonical(normalized):
                raise ValueError("Invalid date format")
            parse_month_day(normalized)
            return normalized


class ContactOut(BaseModel):
        """A stored reminder annotated for display on a given day."""

        model_config = ConfigDict(frozen=True)

        id: str
        name: str
        phone: str = ""
        date: str
        type: str
        reference: str = ""
        next_occurrence: datetime.date
        days_remaining: int = Field(ge=0)
        days_label: str
        message_link: str | None = None


class NotificationOut(BaseModel):
        """A notification that should be shown to the user now."""

        contact_id: str
        days_remaining: int
        title: str
        body: str
        tag: str


class NotificationPreference(BaseModel):
        enabled: bool
