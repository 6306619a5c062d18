"""Small text helpers shared by the JSON API and the HTML view."""


def days_label(days_remaining: int) -> str:
    if days_remaining == 0:
        return "Today!"
    if days_remaining == 1:
        return "Tomorrow"
    return f"In {days_remaining} days"


def greeting_for_hour(hour: int) -> str:
    if hour >= 17:
        return "Good Evening"
    if hour >= 12:
        return "Good Afternoon"
    return "Good Morning"


def summary_text(count: int, query: str = "") -> str:
    """Header line describing the visible list, e.g. "You have 3 upcoming events."."""

    query = (query or "").strip()
    if query:
        if count == 0:
            return f'No results found for "{query}".'
        if count == 1:
            return f'Found 1 result for "{query}".'
        return f'Found {count} results for "{query}".'
    if count == 0:
        return "No upcoming events."
    if count == 1:
        return "You have 1 upcoming event."
    return f"You have {count} upcoming events."
