"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Two defaults with no component in common expose any part a string leaves out
_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2001, 2, 2)

# ISO dates, optionally followed by a time, are never handed to dateutil
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}(?:[T ].*)?$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-01-15", "January 15, 2025", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "next month", etc.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None:
        raise ValueError("Missing date")
    date_str = str(date_str).strip().lower()
    if not date_str:
        raise ValueError("Missing date")
    today = today or date.today()

    relative_dates = {
        "today": today,
        "hoy": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)

    elif date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    # ISO first so "2025-02-03" is never read day-first
    try:
        return datetime.strptime(date_str[:10], "%Y-%m-%d").date()
    except ValueError:
        pass

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def coerce_date(value: object) -> date:
    """Return a stored value as a date.

    Unlike parse_date, relative words are rejected and a string must name a
    complete date: dateutil fills missing parts from its default, so the
    string is parsed against two different defaults and must give the same
    day both times.

    Raises:
        ValueError: If value is missing or not a complete date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or value == "":
        raise ValueError("Missing date")
    if not isinstance(value, str):
        raise ValueError(f"Could not parse date '{value}'")

    text = value.strip()
    if _ISO_DATE.match(text):
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d").date()
        except ValueError as e:
            raise ValueError(f"Invalid date '{value}': {e}")

    try:
        first = date_parser.parse(text, default=_FIRST_DEFAULT)
        second = date_parser.parse(text, default=_SECOND_DEFAULT)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")
    if first.date() != second.date():
        raise ValueError(f"Incomplete date '{value}'")
    return first.date()
