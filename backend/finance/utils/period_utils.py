"""
Month-year helpers.

Budgets are scoped to a calendar month identified by a ``"YYYY-MM"`` string.
Every budget window in the application is derived through this module.
"""

import re
from datetime import date, timedelta

from django.utils import timezone

from ..exceptions import InvalidPeriodError

MONTH_YEAR_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
_MONTH_YEAR_RE = re.compile(MONTH_YEAR_PATTERN)


def parse_month_year(month_year):
    """
    Split a ``"YYYY-MM"`` string into ``(year, month)``.

    Raises:
        InvalidPeriodError: If the value is not a string in that exact format.
    """
    if not isinstance(month_year, str) or not _MONTH_YEAR_RE.fullmatch(month_year):
        raise InvalidPeriodError(month_year)
    year, month = month_year.split("-")
    return int(year), int(month)


def month_date_range(month_year):
    """
    Inclusive ``(first_day, last_day)`` of the month.

    The last day is the day before the first of the next month, so month
    lengths and leap years come from the calendar.
    """
    year, month = parse_month_year(month_year)
    first_day = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first_day, next_first - timedelta(days=1)


def month_year_for(value):
    """``"YYYY-MM"`` of a date."""
    return value.strftime("%Y-%m")


def current_month_year():
    """``"YYYY-MM"`` of today in the configured time zone."""
    return month_year_for(timezone.localdate())
