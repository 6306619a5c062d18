"""
Messaging deep links.

Each reminder with a phone number gets a one-tap link that opens a chat
with a greeting already typed in. The greeting depends on the occasion
kind: birthday and anniversary have their own wording, any other kind
gets a generic "Happy {type}".
"""

from urllib.parse import quote

from settings import settings


def build_greeting(kind: str, name: str = "") -> str:
    """Return the prefilled greeting for an occasion kind."""

    kind = (kind or "").strip()
    if not kind:
        return "Hello! 👋"

    name = (name or "").strip()
    suffix = f" {name}" if name else ""
    lowered = kind.lower()
    if lowered == "birthday":
        return f"Happy Birthday{suffix} 🎉🎂🥳\n\nWish you a splendid years ahead.\n\n✌️"
    if lowered == "anniversary":
        return f"Happy Anniversary{suffix} 💍\n\nWish you a wonderful years ahead.\n\n✌️"
    return f"Happy {kind}{suffix} 🎊\n\nWish you a wonderful years ahead.\n\n✌️"


def whatsapp_link(phone, kind: str, name: str = "") -> str | None:
    """Build the chat link for `phone`, or None when there is no number.

    `phone` is expected in international format without the leading "+".
    """

    if phone is None:
        return None
    phone = str(phone).strip()
    if not phone:
        return None
    text = quote(build_greeting(kind, name), safe="")
    return f"{settings.messaging_base_url.rstrip('/')}/{phone}?text={text}"
