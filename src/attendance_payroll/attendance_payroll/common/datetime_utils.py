from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol, Union

from ..core.exceptions import InvalidRange, ValidationError

DateLike = Union[date, datetime]


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()


@dataclass
class FixedClock:
    """Clock frozen at a given instant (tests, replays)."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def is_weekend(value: DateLike) -> bool:
    return _as_date(value).weekday() >= 5


def count_working_days(start: DateLike, end: DateLike) -> int:
    """Inclusive count of Monday-Friday days between start and end."""
    start, end = _as_date(start), _as_date(end)
    if end < start:
        raise InvalidRange(f"End date {end.isoformat()} is before start date {start.isoformat()}")

    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    working = full_weeks * 5
    for offset in range(remainder):
        if not is_weekend(start + timedelta(days=full_weeks * 7 + offset)):
            working += 1
    return working


def is_within_range(value: DateLike, start: DateLike, end: DateLike) -> bool:
    return _as_date(start) <= _as_date(value) <= _as_date(end)


def is_future_date(value: DateLike, now: datetime) -> bool:
    """True when value falls on a calendar day after now's day."""
    return _as_date(value) > now.date()


def coerce_date(value, field_name: str = "date") -> date:
    """Accept a date, datetime or YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise ValidationError(f"{field_name} is required")
