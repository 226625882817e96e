# Project: weather-trends
# Owner: GreenUnicorn
"""
dates.py — Normalize service timestamps to calendar days.

Historical values are daily and timezone-agnostic, so a timestamp such as
"2020-04-10T00:00:00.000Z" must land on 10 April no matter where the
dashboard runs. We keep the UTC calendar fields and drop the time of day.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def as_date(iso_string: str) -> date | None:
    """Convert an ISO-8601 timestamp to the calendar day of its UTC fields.

    Aware timestamps are converted to UTC first; naive timestamps and bare
    dates are taken as UTC already.

    Args:
        iso_string: Timestamp such as '2020-04-10T00:00:00Z' or '2020-04-10'.

    Returns:
        The calendar day, or None if the input cannot be parsed. Callers
        exclude None days from rendering.
    """
    if not isinstance(iso_string, str):
        return None
    text = iso_string.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc)
        except OverflowError:
            return None
    return date(parsed.year, parsed.month, parsed.day)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end is earlier)."""
    return (end - start).days
