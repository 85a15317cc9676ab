"""Period summary domain service."""

from decimal import Decimal
from typing import Optional, Sequence

from catorcena.database.base import Database
from catorcena.domain.card_charges import charge_occurrences_in_period
from catorcena.domain.entities import (
    AmountModel,
    CardAccount,
    CardPeriodTotal,
    Movement,
    MovementKind,
    OneOff,
    PaidMark,
    Period,
    PeriodItem,
    PeriodReport,
    PeriodSummary,
    Snapshot,
    is_recurring,
)
from catorcena.domain.periods import generate_periods
from catorcena.domain.recurrence import (
    belongs_to_period,
    occurrences_in_period,
    period_amount,
)
from catorcena.domain.snapshot import SnapshotService

ZERO = Decimal("0")


def movement_item(
    movement: Movement,
    period: Period,
    paid_marks: frozenset[PaidMark] = frozenset(),
    model: AmountModel = AmountModel.ENUMERATED,
) -> Optional[PeriodItem]:
    """Return the period line of a movement, or None when it is not in the period."""
    if model == AmountModel.SCALED:
        if not belongs_to_period(movement, period.start, period.end):
            return None
        amount = period_amount(movement)
        rec = movement.recurrence
        day = rec.date if isinstance(rec, OneOff) else max(period.start, rec.start_date)
    else:
        dates = occurrences_in_period(movement, period.start, period.end)
        if not dates:
            return None
        amount = movement.amount * len(dates)
        day = dates[0]

    return PeriodItem(
        item_id=movement.id,
        source="movement",
        kind=movement.kind,
        description=movement.description,
        amount=amount,
        date=day,
        recurring=is_recurring(movement.recurrence),
        paid=PaidMark(period.year, period.index, movement.id) in paid_marks,
    )


def card_items(
    card: CardAccount,
    period: Period,
    paid_marks: frozenset[PaidMark] = frozenset(),
) -> list[PeriodItem]:
    """Return one period line per charge occurrence of a card due in the period."""
    items = []
    for charge in card.charges:
        for occ in charge_occurrences_in_period(charge, card, period.start, period.end):
            description = charge.description
            if charge.installments is not None:
                description = f"{description} (MSI {occ.ordinal + 1}/{charge.installments.months})"
            items.append(
                PeriodItem(
                    item_id=occ.item_id,
                    source="card",
                    kind=MovementKind.EXPENSE,
                    description=description,
                    amount=occ.amount,
                    date=occ.due_date,
                    recurring=charge.is_installment or is_recurring(charge.recurrence),
                    paid=PaidMark(period.year, period.index, occ.item_id) in paid_marks,
                    card_name=card.name,
                )
            )
    return items


def summarize_period(
    snapshot: Snapshot,
    period: Period,
    model: AmountModel = AmountModel.ENUMERATED,
    opening_balance: Decimal = ZERO,
) -> PeriodSummary:
    """Aggregate every movement and card charge of a snapshot into one period.

    The balance is income minus expenses minus card dues; running_balance
    adds it to opening_balance.
    """
    items: list[PeriodItem] = []
    for movement in snapshot.movements:
        item = movement_item(movement, period, snapshot.paid_marks, model)
        if item is not None:
            items.append(item)

    card_totals = []
    for card in snapshot.cards:
        lines = card_items(card, period, snapshot.paid_marks)
        total = sum((line.amount for line in lines), ZERO)
        if total > 0:
            card_totals.append(CardPeriodTotal(card_id=card.id, name=card.name, total=total))
        items.extend(lines)

    income = sum((i.amount for i in items if i.source == "movement" and i.kind == MovementKind.INCOME), ZERO)
    expense = sum((i.amount for i in items if i.source == "movement" and i.kind == MovementKind.EXPENSE), ZERO)
    cards = sum((t.total for t in card_totals), ZERO)
    balance = income - expense - cards

    return PeriodSummary(
        period=period,
        income_total=income,
        expense_total=expense,
        card_charge_total=cards,
        balance=balance,
        running_balance=opening_balance + balance,
        items=tuple(items),
        card_totals=tuple(card_totals),
    )


def summarize_periods(
    snapshot: Snapshot,
    periods: Sequence[Period],
    model: AmountModel = AmountModel.ENUMERATED,
) -> list[PeriodSummary]:
    """Summarize consecutive periods carrying the running balance forward."""
    summaries = []
    running = ZERO
    for period in periods:
        summary = summarize_period(snapshot, period, model, opening_balance=running)
        running = summary.running_balance
        summaries.append(summary)
    return summaries


class SummaryService:
    """Service for building period summaries from the store."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.snapshot_service = SnapshotService(db)

    def build_report(
        self, year: int, model: AmountModel = AmountModel.ENUMERATED
    ) -> PeriodReport:
        """Summarize every period of a year.

        Args:
            year: Calendar year of the period grid
            model: Amount allocation model for recurring movements

        Returns:
            PeriodReport with one summary per period and any data warnings
        """
        snapshot = self.snapshot_service.load()
        summaries = summarize_periods(snapshot, generate_periods(year), model)
        return PeriodReport(year=year, summaries=tuple(summaries), warnings=snapshot.warnings)
