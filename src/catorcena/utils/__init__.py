"""Utility functions for catorcena."""

from catorcena.utils.date_parser import parse_date
from catorcena.utils.amount_parser import parse_amount, round_money

__all__ = ["parse_date", "parse_amount", "round_money"]
