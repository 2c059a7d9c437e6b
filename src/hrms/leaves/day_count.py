from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AbstractSet, List

from ..common.datetime_utils import is_weekend, iter_days
from ..core.constants import HALF_DAY


def working_days(start: date, end: date, holidays: AbstractSet[date]) -> List[date]:
    """Dates in [start, end] that are not Saturday, Sunday or a holiday."""
    return [d for d in iter_days(start, end) if not is_weekend(d) and d not in holidays]


def count_leave_days(start: date, end: date, holidays: AbstractSet[date], *, half_day: bool = False) -> Decimal:
    days = working_days(start, end, holidays)
    if not days:
        return Decimal("0")
    if half_day:
        return HALF_DAY
    return Decimal(len(days))
