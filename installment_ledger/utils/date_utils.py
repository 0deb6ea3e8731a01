"""Calendar-month arithmetic used for installment due dates"""

from datetime import date, datetime
from typing import Tuple


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (1-based)"""
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - date(year, month, 1)).days


def add_months(base: date, months: int) -> date:
    """
    Advance a date by whole calendar months.

    Day-of-month is preserved where the target month has it, otherwise
    clamped to the target month's last day:

        2024-01-31 + 1 month -> 2024-02-29
        2024-03-31 + 1 month -> 2024-04-30

    Raises ValueError when the result falls outside date.min..date.max.
    """
    total_months = base.month - 1 + months
    year = base.year + total_months // 12
    month = total_months % 12 + 1
    day = min(base.day, days_in_month(year, month))
    return date(year, month, day)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month (inclusive); ValueError for a month that does not exist"""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def as_date(value: date | datetime) -> date:
    """Normalize a datetime to its calendar date (midnight, no time-of-day)"""
    if isinstance(value, datetime):
        return value.date()
    return value
