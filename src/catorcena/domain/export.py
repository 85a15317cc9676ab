"""Flat export rows and CSV writing."""

import csv
from pathlib import Path
from typing import Any, Iterable, Sequence

import structlog

from catorcena.domain.entities import ExpenseRow, MsiPurchase, PeriodSummary
from catorcena.utils.amount_parser import round_money

logger = structlog.get_logger()

PERIOD_COLUMNS = (
    "period",
    "start",
    "end",
    "item_id",
    "source",
    "kind",
    "description",
    "card",
    "date",
    "amount",
    "recurring",
    "paid",
)

PERIOD_TOTAL_COLUMNS = (
    "period",
    "start",
    "end",
    "income",
    "expense",
    "cards",
    "balance",
    "running_balance",
)

EXPENSE_COLUMNS = ("origin", "description", "frequency", "date", "amount", "msi")

MSI_COLUMNS = (
    "card",
    "description",
    "amount",
    "months",
    "monthly_amount",
    "payments_made",
    "payments_remaining",
    "next_payment",
    "end_date",
    "purchase_date",
)


def period_rows(summaries: Iterable[PeriodSummary]) -> list[dict[str, Any]]:
    """Flatten period summaries into one row per item."""
    rows = []
    for summary in summaries:
        period = summary.period
        for item in summary.items:
            rows.append(
                {
                    "period": period.index + 1,
                    "start": period.start.isoformat(),
                    "end": period.end.isoformat(),
                    "item_id": item.item_id,
                    "source": item.source,
                    "kind": item.kind.value,
                    "description": item.description,
                    "card": item.card_name or "",
                    "date": item.date.isoformat(),
                    "amount": str(round_money(item.amount)),
                    "recurring": "yes" if item.recurring else "no",
                    "paid": "yes" if item.paid else "no",
                }
            )
    return rows


def period_total_rows(summaries: Iterable[PeriodSummary]) -> list[dict[str, Any]]:
    """Flatten period summaries into one totals row per period."""
    return [
        {
            "period": s.period.index + 1,
            "start": s.period.start.isoformat(),
            "end": s.period.end.isoformat(),
            "income": str(round_money(s.income_total)),
            "expense": str(round_money(s.expense_total)),
            "cards": str(round_money(s.card_charge_total)),
            "balance": str(round_money(s.balance)),
            "running_balance": str(round_money(s.running_balance)),
        }
        for s in summaries
    ]


def expense_table_rows(rows: Iterable[ExpenseRow]) -> list[dict[str, Any]]:
    """Flatten expense report rows."""
    return [
        {
            "origin": row.origin,
            "description": row.description,
            "frequency": row.frequency or "",
            "date": row.date.isoformat(),
            "amount": str(round_money(row.amount)),
            "msi": "yes" if row.is_msi else "no",
        }
        for row in rows
    ]


def msi_table_rows(purchases: Iterable[MsiPurchase]) -> list[dict[str, Any]]:
    """Flatten MSI purchases with their plan status."""
    return [
        {
            "card": p.card_name,
            "description": p.description,
            "amount": str(round_money(p.amount)),
            "months": p.months,
            "monthly_amount": str(round_money(p.status.monthly_amount)),
            "payments_made": p.status.payments_made,
            "payments_remaining": p.status.payments_remaining,
            "next_payment": p.status.next_payment.isoformat(),
            "end_date": p.status.end_date.isoformat(),
            "purchase_date": p.purchase_date.isoformat(),
        }
        for p in purchases
    ]


def write_csv(path: Path | str, rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> int:
    """Write rows to a CSV file with a header line.

    Returns:
        Number of data rows written
    """
    csv_path = Path(path)
    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(columns))
        writer.writeheader()
        writer.writerows(rows)
    logger.info("csv_written", path=str(csv_path), rows=len(rows))
    return len(rows)
