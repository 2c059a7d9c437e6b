from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_iso_date(value: Optional[str], field_name: str) -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format") from None


def parse_month(value: Optional[str]) -> tuple[int, int]:
    """Parse a YYYY-MM period into (year, month)."""
    if not value:
        raise ValidationError("month is required")
    try:
        parsed = datetime.strptime(str(value), "%Y-%m")
    except ValueError:
        raise ValidationError("month must be in YYYY-MM format") from None
    return parsed.year, parsed.month


def require_time(value: Optional[str], field_name: str) -> time:
    if not value:
        raise ValidationError(f"{field_name} is required")
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(str(value), fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} must be a time in HH:MM format")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def previous_month(d: date) -> date:
    return (d.replace(day=1) - timedelta(days=1)).replace(day=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def today_local() -> date:
    return now_local().date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
