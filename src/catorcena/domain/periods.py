"""Catorcena period grid."""

from datetime import date, timedelta
from typing import Optional, Sequence

from catorcena.domain.entities import Period

PERIODS_PER_YEAR = 26
PERIOD_LENGTH = 14

# First period start of each supported year. Each anchor is the previous
# one plus 26 * 14 days, so consecutive years form one unbroken grid.
ANCHOR_DATES = {
    2023: date(2023, 1, 13),
    2024: date(2024, 1, 12),
    2025: date(2025, 1, 10),
    2026: date(2026, 1, 9),
    2027: date(2027, 1, 8),
    2028: date(2028, 1, 7),
    2029: date(2029, 1, 5),
    2030: date(2030, 1, 4),
}


def anchor_date(year: int) -> date:
    """Return the first period start of a year (January 10 when unsupported)."""
    return ANCHOR_DATES.get(year, date(year, 1, 10))


def generate_periods(year: int) -> list[Period]:
    """Build the 26 contiguous 14-day periods of a year."""
    anchor = anchor_date(year)
    periods = []
    for i in range(PERIODS_PER_YEAR):
        start = anchor + timedelta(days=PERIOD_LENGTH * i)
        periods.append(Period(year=year, index=i, start=start, end=start + timedelta(days=PERIOD_LENGTH - 1)))
    return periods


def period_index_for(periods: Sequence[Period], day: date) -> Optional[int]:
    """Return the index of the period containing day, or None."""
    for period in periods:
        if period.contains(day):
            return period.index
    return None
