"""Tests for the catorcena period grid."""

import pytest
from datetime import date, timedelta

from catorcena.domain.periods import (
    ANCHOR_DATES,
    PERIODS_PER_YEAR,
    anchor_date,
    generate_periods,
    period_index_for,
)


@pytest.mark.parametrize("year", [2023, 2024, 2025, 2026, 2030, 2031, 2019])
def test_year_has_26_contiguous_14_day_periods(year):
    periods = generate_periods(year)
    assert len(periods) == PERIODS_PER_YEAR
    assert [p.index for p in periods] == list(range(PERIODS_PER_YEAR))
    for period in periods:
        assert (period.end - period.start).days == 13
    for previous, current in zip(periods, periods[1:]):
        assert current.start == previous.end + timedelta(days=1)


def test_first_period_starts_on_anchor():
    assert generate_periods(2025)[0].start == date(2025, 1, 10)
    assert generate_periods(2025)[-1].end == date(2026, 1, 8)


def test_supported_years_chain_without_gaps():
    years = sorted(ANCHOR_DATES)
    for year in years[:-1]:
        assert generate_periods(year)[-1].end + timedelta(days=1) == anchor_date(year + 1)


def test_unsupported_year_defaults_to_january_10():
    assert anchor_date(2040) == date(2040, 1, 10)


def test_period_index_for():
    periods = generate_periods(2025)
    assert period_index_for(periods, date(2025, 1, 10)) == 0
    assert period_index_for(periods, date(2025, 1, 23)) == 0
    assert period_index_for(periods, date(2025, 1, 24)) == 1
    assert period_index_for(periods, date(2025, 3, 1)) == 3
    assert period_index_for(periods, date(2025, 1, 9)) is None


def test_period_contains_both_ends():
    period = generate_periods(2025)[0]
    assert period.contains(period.start)
    assert period.contains(period.end)
    assert not period.contains(period.end + timedelta(days=1))
