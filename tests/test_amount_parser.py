"""Tests for amount parsing and rounding."""

import pytest
from decimal import Decimal

from catorcena.utils.amount_parser import coerce_amount, format_money, parse_amount, round_money


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$1,234.56", Decimal("1234.56")),
        ("-10", Decimal("-10")),
        ("(99.90)", Decimal("-99.90")),
        ("1500 MXN", Decimal("1500")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity"])
def test_parse_amount_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_coerce_amount_keeps_float_text():
    assert coerce_amount(0.1) == Decimal("0.1")
    assert coerce_amount(250) == Decimal("250")
    assert coerce_amount(Decimal("3.5")) == Decimal("3.5")


@pytest.mark.parametrize("value", [None, True, Decimal("NaN"), float("inf")])
def test_coerce_amount_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        coerce_amount(value)


def test_round_money_is_half_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("-1.005")) == Decimal("-1.01")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(Decimal("-10")) == "-$10.00"
