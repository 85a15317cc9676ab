"""Paid-mark commands."""

import click

from catorcena.cli.date_options import today_from
from catorcena.cli.error_handling import handle_domain_error
from catorcena.domain.errors import DomainError
from catorcena.domain.paid import PaidService
from catorcena.domain.periods import PERIODS_PER_YEAR


@click.group()
def paid_group():
    """Mark period items as paid."""
    pass


@paid_group.command("toggle")
@click.argument("period", type=click.IntRange(1, PERIODS_PER_YEAR), metavar="PERIOD")
@click.argument("item_id", metavar="ITEM_ID")
@click.option("--year", type=int, help="Year of the period grid (defaults to the current year)")
@click.pass_context
def toggle_paid(ctx, period: int, item_id: str, year: int | None):
    """Flip the paid flag of an item in a catorcena.

    PERIOD is the catorcena number (1-26) and ITEM_ID is shown by
    'periods --period N'.

    Examples:
        catorcena paid toggle 5 12
        catorcena paid toggle 5 1-3-0 --year 2026
    """
    db = ctx.obj["db"]
    service = PaidService(db)
    year = year or today_from(ctx).year

    try:
        paid = service.toggle(year, period - 1, item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    state = "paid" if paid else "unpaid"
    click.echo(f"Item {item_id} in catorcena {period} of {year} marked as {state}")


@paid_group.command("list")
@click.option("--year", type=int, help="Only one year")
@click.option("--period", type=click.IntRange(1, PERIODS_PER_YEAR), help="Only one catorcena")
@click.pass_context
def list_paid(ctx, year: int | None, period: int | None):
    """List items marked as paid."""
    db = ctx.obj["db"]
    service = PaidService(db)

    marks = service.list_marks(year)
    if period is not None:
        marks = [m for m in marks if m.period_index == period - 1]
    if not marks:
        click.echo("No paid items.")
        return

    click.echo("\nPaid items:")
    click.echo("-" * 40)
    for mark in marks:
        click.echo(f"{mark.year} | Catorcena {mark.period_index + 1:2d} | {mark.item_id}")


def register_commands(cli):
    """Register paid commands with main CLI."""
    cli.add_command(paid_group, name="paid")
