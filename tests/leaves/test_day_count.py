from datetime import date
from decimal import Decimal

from hrms.leaves.day_count import count_leave_days, working_days


def test_full_week_counts_weekdays_only():
    # 2026-03-02 is a Monday
    assert count_leave_days(date(2026, 3, 2), date(2026, 3, 8), set()) == Decimal("5")


def test_holidays_are_excluded():
    holidays = {date(2026, 3, 4)}
    days = working_days(date(2026, 3, 2), date(2026, 3, 6), holidays)
    assert date(2026, 3, 4) not in days
    assert len(days) == 4


def test_weekend_only_range_has_no_days():
    assert count_leave_days(date(2026, 3, 7), date(2026, 3, 8), set()) == Decimal("0")


def test_half_day_counts_half():
    assert count_leave_days(date(2026, 3, 3), date(2026, 3, 3), set(), half_day=True) == Decimal("0.5")


def test_half_day_on_holiday_counts_nothing():
    holiday = date(2026, 3, 3)
    assert count_leave_days(holiday, holiday, {holiday}, half_day=True) == Decimal("0")
