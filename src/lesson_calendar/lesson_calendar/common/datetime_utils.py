from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    """Drop tzinfo after converting an aware datetime to local time.

    Everything in the core compares naive local datetimes, the same way the
    MySQL DATETIME columns come back from the connector.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Best-effort conversion of a stored timestamp; None when unusable.

    Accepts datetime, date (midnight) and ISO-8601 strings (a trailing "Z" is
    treated as UTC).
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        v = value.strip()
        if not v:
            return None
        if v.endswith("Z"):
            v = v[:-1] + "+00:00"
        try:
            return to_local_naive(datetime.fromisoformat(v))
        except ValueError:
            return None
    return None


def start_of_day(value: datetime | date) -> datetime:
    d = value.date() if isinstance(value, datetime) else value
    return datetime.combine(d, time.min)


def end_of_day(value: datetime | date) -> datetime:
    d = value.date() if isinstance(value, datetime) else value
    return datetime.combine(d, time.max)


def noon_of(value: datetime | date) -> datetime:
    d = value.date() if isinstance(value, datetime) else value
    return datetime.combine(d, time(12, 0))


def day_delta(start: datetime, end: datetime) -> int:
    """Whole days between the normalized start-of-day of both instants."""
    return (start_of_day(end) - start_of_day(start)).days


def iter_dates(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def js_weekday(d: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6 (how lesson schedules store it)."""
    return (d.weekday() + 1) % 7
