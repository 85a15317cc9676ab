"""Card charge occurrences resolved to due dates."""

from datetime import date
from decimal import Decimal

import structlog

from catorcena.domain.billing import due_date
from catorcena.domain.entities import CardAccount, Charge, ChargeOccurrence, OneOff
from catorcena.domain.errors import InvalidRecurrenceConfig
from catorcena.domain.installments import installment_dues
from catorcena.domain.recurrence import occurrences_between
from catorcena.utils.dates import in_inclusive_range

logger = structlog.get_logger()


def purchase_occurrences(charge: Charge, until: date) -> list[date]:
    """Enumerate purchase dates of a non-MSI charge up to until.

    Recurring charges start on their purchase date. Anything that is not a
    recognized recurrence is a single purchase on the purchase date.
    """
    if until < charge.purchase_date:
        return []
    recurrence = charge.recurrence
    if isinstance(recurrence, OneOff):
        return [charge.purchase_date]
    try:
        return occurrences_between(recurrence, charge.purchase_date, until)
    except InvalidRecurrenceConfig:
        logger.warning(
            "invalid_recurrence_config",
            charge_id=charge.id,
            recurrence=type(recurrence).__name__,
        )
        return [charge.purchase_date]


def charge_occurrences_in_period(
    charge: Charge, card: CardAccount, start: date, end: date
) -> list[ChargeOccurrence]:
    """Resolve the occurrences of a charge that are due inside [start, end].

    MSI charges yield one occurrence per installment due in the period, with
    the installment index as ordinal. Other charges yield one occurrence per
    purchase whose due date is in the period, numbered from the purchase date.
    """
    if charge.is_installment:
        return [
            ChargeOccurrence(
                card_id=card.id,
                charge_id=charge.id,
                ordinal=due.index,
                purchase_date=due.purchase_date,
                due_date=due.due_date,
                amount=due.amount,
            )
            for due in installment_dues(charge, card)
            if in_inclusive_range(due.due_date, start, end)
        ]

    result = []
    # A due date never precedes its purchase, so purchases after `end` are irrelevant
    for ordinal, purchase in enumerate(purchase_occurrences(charge, end)):
        due = due_date(purchase, card)
        if in_inclusive_range(due, start, end):
            result.append(
                ChargeOccurrence(
                    card_id=card.id,
                    charge_id=charge.id,
                    ordinal=ordinal,
                    purchase_date=purchase,
                    due_date=due,
                    amount=charge.amount,
                )
            )
    return result


def charge_dues_in_period(charge: Charge, card: CardAccount, start: date, end: date) -> list[date]:
    """Return the due dates of a charge that land inside [start, end]."""
    return [occ.due_date for occ in charge_occurrences_in_period(charge, card, start, end)]


def card_occurrences_in_period(card: CardAccount, start: date, end: date) -> list[ChargeOccurrence]:
    """Resolve every charge occurrence of a card due inside a period."""
    result = []
    for charge in card.charges:
        result.extend(charge_occurrences_in_period(charge, card, start, end))
    return result


def card_period_total(card: CardAccount, start: date, end: date) -> Decimal:
    """Sum what a card bills inside [start, end].

    MSI charges contribute their installment amount per due; other charges
    contribute their full amount per occurrence.
    """
    return sum(
        (occ.amount for occ in card_occurrences_in_period(card, start, end)),
        Decimal("0"),
    )
