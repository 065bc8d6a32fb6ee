from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> date:
    """Accept a date, a datetime or a YYYY-MM-DD string (as stored by the adapters)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort conversion of a raw event timestamp to a naive local datetime.

    Returns None when the value cannot be understood. Offset-aware values keep their
    wall-clock time: every date is read in the single organizational timezone.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    return parsed.replace(tzinfo=None)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def inclusive_day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Instant range covering the whole of [start, end]."""
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
