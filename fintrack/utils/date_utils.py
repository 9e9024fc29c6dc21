"""Date manipulation utilities"""

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def first_day_of_month(day: date) -> date:
    return day.replace(day=1)


def last_day_of_month(year: int, month: int) -> int:
    """Number of the last day in the given month (28-31)"""
    return calendar.monthrange(year, month)[1]


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, keeping the day-of-month when valid.

    Days past the end of the target month are clamped by relativedelta:
    2025-01-31 + 1 month -> 2025-02-28.
    """
    return from_date + relativedelta(months=months)


def add_years(from_date: date, years: int) -> date:
    """Add calendar years (2024-02-29 + 1 year -> 2025-02-28)"""
    return from_date + relativedelta(years=years)


def format_year_month(day: date) -> str:
    """Format as YYYY-MM with a zero-padded month"""
    return f"{day.year:04d}-{day.month:02d}"
