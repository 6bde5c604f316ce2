"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, List, Optional


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_label(day: date) -> str:
    """Axis label for grouping daily points, e.g. 'Jan 2025'"""
    return day.strftime("%b %Y")


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Parse an ISO date or timestamp into a date.

    Accepts date/datetime objects and strings such as "2025-02-01" or
    "2025-02-01T09:30:00.000Z". Returns None for anything unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
