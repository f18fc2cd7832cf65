"""Date and time utility functions."""
from datetime import date, datetime, timedelta
from typing import Optional, Union

import pytz
from constants import DATE_FORMAT_DISPLAY


def today_in_timezone(timezone_str: str = "America/Sao_Paulo") -> date:
    """
    Get the current calendar date in a business timezone.

    Args:
        timezone_str: IANA timezone name

    Returns:
        Today's date in that timezone
    """
    return datetime.now(pytz.timezone(timezone_str)).date()


def days_between(start: date, end: date) -> int:
    """
    Calculate days between two dates.

    Args:
        start: Start date
        end: End date

    Returns:
        Number of days (negative if end < start)
    """
    return (end - start).days


def add_days(start: date, days: int) -> date:
    """Shift a date by a number of calendar days."""
    return start + timedelta(days=days)


def format_date_display(dt: Optional[Union[date, datetime]]) -> str:
    """
    Format date for display to users.

    Args:
        dt: Date or datetime to format

    Returns:
        Formatted date string, or empty string if None
    """
    if dt is None:
        return ""

    if isinstance(dt, datetime):
        dt = dt.date()
    return dt.strftime(DATE_FORMAT_DISPLAY)
