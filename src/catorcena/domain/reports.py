"""Expense reports built from a snapshot.

Amounts are the stored amounts, not period allocations: a recurring
expense is listed once with its per-occurrence amount and an MSI purchase
contributes its monthly installment ("cuota") to recurring totals.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional

import structlog

from catorcena.database.base import Database
from catorcena.domain.entities import (
    CardAccount,
    Charge,
    ExpenseBreakdown,
    ExpenseRow,
    MovementKind,
    MsiPurchase,
    Recurrence,
    Snapshot,
    base_date,
    is_recurring,
)
from catorcena.domain.errors import InvalidInstallmentPlan
from catorcena.domain.installments import installment_dues, installment_status, monthly_amount
from catorcena.domain.snapshot import SnapshotService
from catorcena.utils.dates import in_inclusive_range, shift_month

logger = structlog.get_logger()

ZERO = Decimal("0")
GENERAL_ORIGIN = "General"


def card_origin(card: CardAccount) -> str:
    return f"TC: {card.name}"


def debit_origin(name: str) -> str:
    return f"TD: {name}"


def _frequency(recurrence: Recurrence) -> str:
    return recurrence.frequency.value


def _in_filter(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return in_inclusive_range(day, start or date.min, end or date.max)


def _msi_charges(snapshot: Snapshot) -> Iterator[tuple[CardAccount, Charge]]:
    for card in snapshot.cards:
        for charge in card.charges:
            if charge.is_installment:
                yield card, charge


def expense_rows(
    snapshot: Snapshot, start: Optional[date] = None, end: Optional[date] = None
) -> list[ExpenseRow]:
    """List every expense: general, credit card and debit account.

    Rows are filtered on their base date (date of a one-off, start date of a
    recurring entry, purchase date of a charge) and sorted by it.
    """
    rows = []
    for movement in snapshot.movements:
        day = base_date(movement.recurrence)
        if movement.kind == MovementKind.EXPENSE and _in_filter(day, start, end):
            rows.append(
                ExpenseRow(
                    origin=GENERAL_ORIGIN,
                    description=movement.description,
                    amount=movement.amount,
                    date=day,
                    frequency=_frequency(movement.recurrence),
                )
            )

    for card in snapshot.cards:
        for charge in card.charges:
            if _in_filter(charge.purchase_date, start, end):
                rows.append(
                    ExpenseRow(
                        origin=card_origin(card),
                        description=charge.description,
                        amount=charge.amount,
                        date=charge.purchase_date,
                        frequency=_frequency(charge.recurrence),
                        is_msi=charge.is_installment,
                    )
                )

    for account in snapshot.debit_accounts:
        for movement in account.movements:
            day = base_date(movement.recurrence)
            if movement.kind == MovementKind.EXPENSE and _in_filter(day, start, end):
                rows.append(
                    ExpenseRow(
                        origin=debit_origin(account.name),
                        description=movement.description,
                        amount=movement.amount,
                        date=day,
                        frequency=_frequency(movement.recurrence),
                    )
                )

    return sorted(rows, key=lambda row: row.date)


def recurring_rows(snapshot: Snapshot) -> list[ExpenseRow]:
    """List recurring expenses; MSI purchases appear with their monthly installment."""
    rows = []
    for movement in snapshot.movements:
        if movement.kind == MovementKind.EXPENSE and is_recurring(movement.recurrence):
            rows.append(
                ExpenseRow(
                    origin=GENERAL_ORIGIN,
                    description=movement.description,
                    amount=movement.amount,
                    date=base_date(movement.recurrence),
                    frequency=_frequency(movement.recurrence),
                )
            )

    for card in snapshot.cards:
        for charge in card.charges:
            if charge.is_installment:
                try:
                    amount = monthly_amount(charge)
                except InvalidInstallmentPlan as e:
                    logger.warning("invalid_installment_plan", charge_id=charge.id, reason=str(e))
                    continue
                rows.append(
                    ExpenseRow(
                        origin=card_origin(card),
                        description=charge.description,
                        amount=amount,
                        date=charge.purchase_date,
                        frequency=f"MSI ({charge.installments.months})",
                        is_msi=True,
                    )
                )
            elif is_recurring(charge.recurrence):
                rows.append(
                    ExpenseRow(
                        origin=card_origin(card),
                        description=charge.description,
                        amount=charge.amount,
                        date=charge.purchase_date,
                        frequency=_frequency(charge.recurrence),
                    )
                )

    for account in snapshot.debit_accounts:
        for movement in account.movements:
            if movement.kind == MovementKind.EXPENSE and is_recurring(movement.recurrence):
                rows.append(
                    ExpenseRow(
                        origin=debit_origin(account.name),
                        description=movement.description,
                        amount=movement.amount,
                        date=base_date(movement.recurrence),
                        frequency=_frequency(movement.recurrence),
                    )
                )

    return sorted(rows, key=lambda row: row.date)


def msi_purchases(snapshot: Snapshot, today: date) -> list[MsiPurchase]:
    """List MSI purchases with their plan status, by purchase date."""
    purchases = []
    for card, charge in _msi_charges(snapshot):
        try:
            status = installment_status(charge, card, today)
        except InvalidInstallmentPlan as e:
            logger.warning("invalid_installment_plan", charge_id=charge.id, reason=str(e))
            continue
        purchases.append(
            MsiPurchase(
                card_name=card.name,
                description=charge.description,
                amount=charge.amount,
                months=charge.installments.months,
                purchase_date=charge.purchase_date,
                status=status,
            )
        )
    return sorted(purchases, key=lambda p: p.purchase_date)


def msi_monthly_flow(snapshot: Snapshot) -> list[tuple[str, Decimal]]:
    """Sum MSI installments per month until every plan is paid off.

    Installment i of a purchase falls in the month of the purchase date
    plus i months. Months run contiguously from the first installment to
    the last one, so months without installments are listed with zero.

    Returns:
        List of ("YYYY-MM", total) pairs in month order
    """
    totals: dict[tuple[int, int], Decimal] = {}
    for card, charge in _msi_charges(snapshot):
        try:
            dues = installment_dues(charge, card)
        except InvalidInstallmentPlan:
            continue
        for due in dues:
            key = (due.purchase_date.year, due.purchase_date.month)
            totals[key] = totals.get(key, ZERO) + due.amount

    if not totals:
        return []

    flow: OrderedDict[str, Decimal] = OrderedDict()
    year, month = min(totals)
    last = max(totals)
    while (year, month) <= last:
        flow[f"{year:04d}-{month:02d}"] = totals.get((year, month), ZERO)
        year, month = shift_month(year, month, 1)
    return list(flow.items())


def expense_breakdown(snapshot: Snapshot, include_debit: bool = False) -> ExpenseBreakdown:
    """Split expenses into normal, recurring and MSI totals.

    MSI purchases contribute their monthly installment. Debit account
    expenses are only counted when include_debit is set.
    """
    normal = recurring = msi = ZERO
    for movement in snapshot.movements:
        if movement.kind != MovementKind.EXPENSE:
            continue
        if is_recurring(movement.recurrence):
            recurring += movement.amount
        else:
            normal += movement.amount

    for card in snapshot.cards:
        for charge in card.charges:
            if charge.is_installment:
                try:
                    msi += monthly_amount(charge)
                except InvalidInstallmentPlan:
                    continue
            elif is_recurring(charge.recurrence):
                recurring += charge.amount
            else:
                normal += charge.amount

    if include_debit:
        for account in snapshot.debit_accounts:
            for movement in account.movements:
                if movement.kind != MovementKind.EXPENSE:
                    continue
                if is_recurring(movement.recurrence):
                    recurring += movement.amount
                else:
                    normal += movement.amount

    return ExpenseBreakdown(normal=normal, recurring=recurring, msi=msi)


class ReportService:
    """Service for building expense reports from the store."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db
        self.snapshot_service = SnapshotService(db)

    def expenses(self, start: Optional[date] = None, end: Optional[date] = None) -> list[ExpenseRow]:
        """List expenses whose base date is within the optional filter."""
        return expense_rows(self.snapshot_service.load(), start, end)

    def recurring(self) -> list[ExpenseRow]:
        """List recurring expenses including MSI installments."""
        return recurring_rows(self.snapshot_service.load())

    def msi(self, today: date) -> tuple[list[MsiPurchase], list[tuple[str, Decimal]]]:
        """Return the MSI purchases with their status and the monthly flow."""
        snapshot = self.snapshot_service.load()
        return msi_purchases(snapshot, today), msi_monthly_flow(snapshot)

    def breakdown(self, include_debit: bool = False) -> ExpenseBreakdown:
        """Split expenses into normal, recurring and MSI totals."""
        return expense_breakdown(self.snapshot_service.load(), include_debit)
