from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

DateLike = Union[str, date, datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_datetime(value: DateLike) -> datetime:
    """Parse an ISO date or timestamp; naive values are taken as UTC.

    A bare date means midnight at the start of that day.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise TypeError(f"expected a date, datetime or ISO string, got {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
