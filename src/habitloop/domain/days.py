"""Calendar-day normalization helpers.

Every day the application reasons about is a plain ``datetime.date`` bucketed
in UTC. Time-of-day and local offsets are discarded at the edges so that the
streak engine only ever compares whole days.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

from ..errors import MalformedDay

DayLike = Union[date, datetime, str]


def to_day(value: DayLike) -> date:
    """Normalize ``value`` to a UTC calendar day.

    Aware datetimes are converted to UTC first; naive datetimes are assumed to
    already be UTC. Strings may be ``YYYY-MM-DD`` or a full ISO-8601 timestamp.
    Anything else raises :class:`MalformedDay`.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_day(value)
    raise MalformedDay(f"Cannot interpret {value!r} as a calendar day")


def _parse_day(raw: str) -> date:
    text = raw.strip()
    if not text:
        raise MalformedDay("Empty date string")
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return to_day(datetime.fromisoformat(text))
    except ValueError as exc:
        raise MalformedDay(f"Cannot interpret {raw!r} as a calendar day") from exc


def utc_today(now: DayLike | None = None) -> date:
    """Return ``now`` as a day, or the current UTC day when omitted."""

    if now is None:
        return datetime.now(timezone.utc).date()
    return to_day(now)


__all__ = ["DayLike", "to_day", "utc_today"]
