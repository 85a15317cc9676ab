"""Debit account yield accrual, settlement and projection.

A yield entry moves through three states: not yet generated, projected
(computed on the fly, display only) and settled (persisted as an income
movement flagged is_yield, counted in the balance). Projected entries are
never counted toward the balance.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from catorcena.domain.entities import (
    AccrualFrequency,
    DebitAccount,
    DebitMovement,
    MovementKind,
    OneOff,
    YieldConfig,
    YieldEntry,
    YieldPoint,
)
from catorcena.domain.recurrence import occurrences_between
from catorcena.utils.amount_parser import round_money
from catorcena.utils.dates import add_months_clamped

logger = structlog.get_logger()

YIELD_DESCRIPTION = "Rendimiento"
ZERO = Decimal("0")


def yield_capital(account: DebitAccount, as_of: date) -> Decimal:
    """Return the capital yield is computed on.

    Only one-off movements dated on or before as_of count; recurring
    movements are left out of the base. The result is capped when the
    account caps its yield and is never negative.
    """
    capital = ZERO
    for movement in account.movements:
        rec = movement.recurrence
        if not isinstance(rec, OneOff) or rec.date > as_of:
            continue
        if movement.kind == MovementKind.INCOME:
            capital += movement.amount
        else:
            capital -= movement.amount

    config = account.yield_config
    if config.capped and config.cap_amount is not None:
        capital = min(capital, config.cap_amount)
    return max(capital, ZERO)


def accrual_rate(config: YieldConfig) -> Decimal:
    """Return the rate applied per accrual step."""
    annual = Decimal(config.annual_rate_percent) / 100
    if config.accrual_frequency == AccrualFrequency.DAILY:
        return annual / 365
    return annual / 12


def accrual_dates(config: YieldConfig, as_of: date) -> list[date]:
    """Return the accrual steps from last_accrual_date up to (not including) as_of."""
    if config.last_accrual_date is None:
        return []
    steps = []
    n = 0
    while True:
        if config.accrual_frequency == AccrualFrequency.DAILY:
            step = config.last_accrual_date + timedelta(days=n)
        else:
            step = add_months_clamped(config.last_accrual_date, n)
        if step >= as_of:
            return steps
        steps.append(step)
        n += 1


def next_accrual_date(config: YieldConfig, as_of: date) -> Optional[date]:
    """Return the first accrual step on or after as_of."""
    if config.last_accrual_date is None:
        return None
    steps = accrual_dates(config, as_of)
    if not steps:
        return config.last_accrual_date
    if config.accrual_frequency == AccrualFrequency.DAILY:
        return steps[-1] + timedelta(days=1)
    return add_months_clamped(config.last_accrual_date, len(steps))


def settled_yield_dates(account: DebitAccount) -> set[date]:
    """Return the dates that already have a settled yield entry."""
    return {
        m.recurrence.date
        for m in account.movements
        if m.is_yield and isinstance(m.recurrence, OneOff)
    }


def accrue_yield(account: DebitAccount, as_of: date) -> list[YieldEntry]:
    """Compute projected yield entries from the last accrual date to as_of.

    Dates that already carry a settled entry are skipped, so a settled
    entry is never projected a second time.
    """
    config = account.yield_config
    if not config.enabled or not config.annual_rate_percent:
        return []

    amount = yield_capital(account, as_of) * accrual_rate(config)
    settled = settled_yield_dates(account)
    return [
        YieldEntry(date=step, amount=amount, settled=False)
        for step in accrual_dates(config, as_of)
        if step not in settled
    ]


def settle_yield(account: DebitAccount, as_of: date) -> tuple[list[DebitMovement], Optional[date]]:
    """Turn the current projection into persisted yield income entries.

    Returns:
        Tuple of (new yield movements, next accrual date). Settled amounts
        are rounded to cents since they become real income.
    """
    entries = accrue_yield(account, as_of)
    movements = [
        DebitMovement(
            id=f"yield-{entry.date.isoformat()}",
            kind=MovementKind.INCOME,
            amount=round_money(entry.amount),
            description=YIELD_DESCRIPTION,
            recurrence=OneOff(entry.date),
            is_yield=True,
        )
        for entry in entries
    ]
    logger.info(
        "yield_settled",
        account_id=account.id,
        entries=len(movements),
        as_of=as_of.isoformat(),
    )
    return movements, next_accrual_date(account.yield_config, as_of)


def project_compound(
    balance: Decimal, annual_rate_percent: Decimal, target_date: date, today: date
) -> Decimal:
    """Project a balance to target_date with daily compounding.

    Daily compounding applies whatever the account's accrual frequency is.
    """
    days = (target_date - today).days
    daily = Decimal(annual_rate_percent) / 100 / 365
    return Decimal(balance) * (1 + daily) ** days


def _ledger(
    account: DebitAccount,
    as_of: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[tuple[date, str, Decimal]]:
    """Flatten an account into dated (date, column, amount) entries.

    One-off movements are taken at their date, recurring movements are
    enumerated up to as_of, and the current projection is appended.
    """
    low = start or date.min
    high = end or date.max
    entries = []
    for movement in account.movements:
        rec = movement.recurrence
        if isinstance(rec, OneOff):
            dates = [rec.date] if low <= rec.date <= high else []
        else:
            dates = occurrences_between(rec, max(low, rec.start_date), min(high, as_of))
        if movement.is_yield:
            column = "settled_yield"
        elif movement.kind == MovementKind.INCOME:
            column = "income"
        else:
            column = "expense"
        entries.extend((d, column, movement.amount) for d in dates)

    for entry in accrue_yield(account, as_of):
        if low <= entry.date <= high:
            entries.append((entry.date, "projected_yield", entry.amount))
    return entries


def account_balance(account: DebitAccount, as_of: date) -> Decimal:
    """Return income plus settled yield minus expense up to as_of; projections excluded."""
    balance = ZERO
    for _, column, amount in _ledger(account, as_of, end=as_of):
        if column == "expense":
            balance -= amount
        elif column != "projected_yield":
            balance += amount
    return balance


def projected_yield_total(account: DebitAccount, as_of: date) -> Decimal:
    """Return the sum of the current (unsettled) projection."""
    return sum((entry.amount for entry in accrue_yield(account, as_of)), ZERO)


def yield_series(
    account: DebitAccount,
    as_of: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[YieldPoint]:
    """Build the per-date series of an account for charting.

    running_balance opens at the balance of the day before start, so a window
    reports the same balances as the full series.
    """
    totals: dict[date, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
    for day, column, amount in _ledger(account, as_of, start, end):
        totals[day][column] += amount

    points = []
    running = ZERO if start is None else account_balance(account, start - timedelta(days=1))
    for day in sorted(totals):
        row = totals[day]
        running += row["income"] + row["settled_yield"] - row["expense"]
        points.append(
            YieldPoint(
                date=day,
                income=row["income"],
                expense=row["expense"],
                settled_yield=row["settled_yield"],
                projected_yield=row["projected_yield"],
                running_balance=running,
            )
        )
    return points
