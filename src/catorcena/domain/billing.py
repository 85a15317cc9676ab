"""Credit card billing cycle."""

from datetime import date, timedelta

from catorcena.domain.entities import CardAccount
from catorcena.utils.dates import as_date, clamp_day, shift_month


def statement_cut_off(purchase_date: date, cut_off_day: int) -> date:
    """Return the statement cut-off that bills a purchase.

    A purchase made after the cut-off day of its month rolls to the next
    month's statement. The cut-off day is clamped to the month length.
    """
    purchase_date = as_date(purchase_date)
    cut_off = clamp_day(purchase_date.year, purchase_date.month, cut_off_day)
    if purchase_date.day > cut_off_day:
        year, month = shift_month(purchase_date.year, purchase_date.month, 1)
        cut_off = clamp_day(year, month, cut_off_day)
    return cut_off


def due_date(purchase_date: date, card: CardAccount) -> date:
    """Return the payment due date of a purchase on a card.

    Payment is due grace_period_days after the statement cut-off that
    bills the purchase.
    """
    cut_off = statement_cut_off(purchase_date, card.cut_off_day)
    return cut_off + timedelta(days=card.grace_period_days)
