"""Tests for the card billing cycle."""

from datetime import date
from decimal import Decimal

from catorcena.domain.billing import due_date, statement_cut_off
from catorcena.domain.entities import CardAccount


def test_purchase_on_or_before_cut_off_bills_this_month():
    assert statement_cut_off(date(2025, 1, 10), 10) == date(2025, 1, 10)
    assert statement_cut_off(date(2025, 1, 3), 10) == date(2025, 1, 10)


def test_purchase_after_cut_off_rolls_to_next_month():
    assert statement_cut_off(date(2025, 1, 15), 10) == date(2025, 2, 10)


def test_december_purchase_rolls_into_january():
    assert statement_cut_off(date(2025, 12, 20), 10) == date(2026, 1, 10)


def test_cut_off_day_is_clamped():
    assert statement_cut_off(date(2025, 2, 5), 31) == date(2025, 2, 28)
    assert statement_cut_off(date(2025, 4, 30), 31) == date(2025, 4, 30)


def test_due_date_adds_grace_days(card):
    assert due_date(date(2025, 1, 15), card) == date(2025, 3, 2)
    assert due_date(date(2025, 2, 15), card) == date(2025, 3, 30)


def test_zero_grace_days_is_due_on_cut_off():
    card = CardAccount(id="2", name="Basica", cut_off_day=25, grace_period_days=0, credit_limit=Decimal("0"))
    assert due_date(date(2025, 5, 25), card) == date(2025, 5, 25)
