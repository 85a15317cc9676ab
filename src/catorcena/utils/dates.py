"""Calendar arithmetic shared by every period and recurrence computation."""

import calendar
import unicodedata
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from catorcena.domain.errors import InvalidWeekday

# Sunday = 0 ordinals, Spanish and English names (accents stripped)
WEEKDAYS = {
    "domingo": 0,
    "lunes": 1,
    "martes": 2,
    "miercoles": 3,
    "jueves": 4,
    "viernes": 5,
    "sabado": 6,
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


def as_date(value: date) -> date:
    """Truncate a datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_days(day: date, n: int) -> date:
    """Return day shifted by n days."""
    return as_date(day) + timedelta(days=n)


def add_months_clamped(day: date, n: int) -> date:
    """Shift by n months keeping the day, clamped to the target month.

    Jan 31 + 1 month is the last day of February.
    """
    return as_date(day) + relativedelta(months=n)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days of a month."""
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, n: int) -> tuple[int, int]:
    """Return (year, month) n months after the given month."""
    total = year * 12 + (month - 1) + n
    return total // 12, total % 12 + 1


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day to the last valid day of the month."""
    return date(year, month, min(day, days_in_month(year, month)))


def in_inclusive_range(day: date, start: date, end: date) -> bool:
    """Return True iff start <= day <= end, compared as calendar dates."""
    return as_date(start) <= as_date(day) <= as_date(end)


def _normalize(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def resolve_weekday(name: str | int) -> int:
    """Map a weekday name or ordinal to 0-6 with Sunday = 0.

    Args:
        name: Weekday name in Spanish or English (case and accents ignored),
            or an ordinal 0-6

    Returns:
        Weekday ordinal, Sunday = 0

    Raises:
        InvalidWeekday: If the value is not a recognized weekday
    """
    if isinstance(name, bool):
        raise InvalidWeekday(f"Unknown weekday '{name}'")
    if isinstance(name, int):
        if 0 <= name <= 6:
            return name
        raise InvalidWeekday(f"Weekday ordinal out of range: {name}")
    if name is None:
        raise InvalidWeekday("Missing weekday")

    key = _normalize(str(name))
    if key.isdigit():
        return resolve_weekday(int(key))
    if key not in WEEKDAYS:
        raise InvalidWeekday(f"Unknown weekday '{name}'")
    return WEEKDAYS[key]


def sunday_weekday(day: date) -> int:
    """Return the weekday of day with Sunday = 0."""
    return (as_date(day).weekday() + 1) % 7


def first_occurrence_on_or_after(day: date, weekday: int) -> date:
    """Advance day until it falls on weekday (Sunday = 0)."""
    day = as_date(day)
    return day + timedelta(days=(weekday - sunday_weekday(day)) % 7)


def iter_days(start: date, end: date):
    """Yield every date from start to end inclusive."""
    current = as_date(start)
    end = as_date(end)
    while current <= end:
        yield current
        current += timedelta(days=1)
