"""Expense report commands."""

from decimal import Decimal

import click

from catorcena.cli.date_options import parse_date_or_exit, today_from
from catorcena.domain.entities import ExpenseRow
from catorcena.domain.reports import ReportService
from catorcena.utils.amount_parser import format_money


def _echo_rows(rows: list[ExpenseRow]) -> None:
    click.echo("-" * 96)
    for row in rows:
        click.echo(
            f"{row.date} | {row.origin:18s} | {format_money(row.amount):>12s} | "
            f"{(row.frequency or ''):12s} | {row.description}"
        )
    click.echo("-" * 96)
    click.echo(f"Total: {format_money(sum((r.amount for r in rows), Decimal('0')))}")


@click.group()
def report_group():
    """Expense reports."""
    pass


@report_group.command("expenses")
@click.option("--start-date", help="Only expenses on or after this date")
@click.option("--end-date", help="Only expenses on or before this date")
@click.option("--breakdown", is_flag=True, help="Also split totals into normal, recurring and MSI")
@click.option("--include-debit", is_flag=True, help="Count debit account expenses in the breakdown")
@click.pass_context
def expenses(ctx, start_date: str | None, end_date: str | None, breakdown: bool, include_debit: bool):
    """List general, credit card and debit expenses by date.

    Examples:
        catorcena report expenses --start-date 2025-01-01 --end-date 2025-03-31
        catorcena report expenses --breakdown
    """
    db = ctx.obj["db"]
    service = ReportService(db)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    rows = service.expenses(start, end)
    if not rows:
        click.echo("No expenses found.")
    else:
        click.echo("\nExpenses:")
        _echo_rows(rows)

    if breakdown:
        split = service.breakdown(include_debit=include_debit)
        click.echo("\nBreakdown:")
        click.echo(f"  Normal:    {format_money(split.normal):>12s}")
        click.echo(f"  Recurring: {format_money(split.recurring):>12s}")
        click.echo(f"  MSI:       {format_money(split.msi):>12s}")


@report_group.command("recurring")
@click.pass_context
def recurring(ctx):
    """List recurring expenses, MSI purchases by their monthly installment."""
    db = ctx.obj["db"]
    service = ReportService(db)

    rows = service.recurring()
    if not rows:
        click.echo("No recurring expenses found.")
        return
    click.echo("\nRecurring expenses:")
    _echo_rows(rows)
    msi_total = sum((r.amount for r in rows if r.is_msi), Decimal("0"))
    click.echo(f"MSI monthly installments: {format_money(msi_total)}")


@report_group.command("msi")
@click.pass_context
def msi(ctx):
    """List MSI purchases and the monthly installment flow until paid off."""
    db = ctx.obj["db"]
    service = ReportService(db)

    purchases, flow = service.msi(today_from(ctx))
    if not purchases:
        click.echo("No MSI purchases found.")
        return

    click.echo("\nMSI purchases:")
    click.echo("-" * 110)
    for p in purchases:
        click.echo(
            f"{p.purchase_date} | {p.card_name:12s} | {p.description:20s} | "
            f"{format_money(p.amount):>12s} | {p.months:2d} x {format_money(p.status.monthly_amount):>10s} | "
            f"paid {p.status.payments_made}, left {p.status.payments_remaining} | "
            f"next {p.status.next_payment} | ends {p.status.end_date}"
        )

    click.echo("\nMonthly flow:")
    for month, total in flow:
        click.echo(f"  {month} {format_money(total):>12s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
