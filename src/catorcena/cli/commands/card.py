"""Credit card management commands."""

import click

from catorcena.cli.account_resolution import resolve_card_or_exit
from catorcena.cli.commands.movement import describe_recurrence
from catorcena.cli.date_options import parse_date_or_exit, today_from
from catorcena.cli.error_handling import handle_domain_error
from catorcena.domain.card import CardService
from catorcena.domain.errors import DomainError
from catorcena.domain.records import ONE_OFF_NAMES
from catorcena.utils.amount_parser import format_money


@click.group()
def card_group():
    """Manage credit cards and their charges."""
    pass


@card_group.command("create")
@click.argument("name", metavar="CARD_NAME")
@click.option("--cut-off-day", type=int, required=True, help="Statement cut-off day of month (1-31)")
@click.option("--grace-days", type=int, default=0, show_default=True, help="Days from cut-off to payment")
@click.option("--limit", "credit_limit", default="0", help="Credit limit")
@click.pass_context
def create_card(ctx, name: str, cut_off_day: int, grace_days: int, credit_limit: str):
    """Create a new credit card.

    Examples:
        catorcena card create "Oro" --cut-off-day 10 --grace-days 20 --limit 30000
    """
    db = ctx.obj["db"]
    service = CardService(db)

    try:
        card_id = service.create_card(
            name=name,
            cut_off_day=cut_off_day,
            grace_period_days=grace_days,
            credit_limit=credit_limit,
        )
        click.echo(f"Created card '{name}' (ID: {card_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("list")
@click.pass_context
def list_cards(ctx):
    """List all cards with their credit usage."""
    db = ctx.obj["db"]
    service = CardService(db)

    cards = service.list_cards()
    if not cards:
        click.echo("No cards found.")
        return

    click.echo("\nCards:")
    click.echo("-" * 90)
    for card in cards:
        click.echo(
            f"ID: {card.id:>3s} | {card.name:15s} | Cut-off: {card.cut_off_day:2d} | "
            f"Grace: {card.grace_period_days:2d} | Limit: {format_money(card.credit_limit)} | "
            f"Spent: {format_money(service.total_spent(card))} | "
            f"Available: {format_money(service.available_credit(card))}"
        )


@card_group.command("show")
@click.argument("card", metavar="CARD")
@click.pass_context
def show_card(ctx, card: str):
    """Show the charges of a card.

    CARD can be a card name or ID.
    """
    db = ctx.obj["db"]
    service = CardService(db)
    card_id = resolve_card_or_exit(ctx, service, card)

    account = service.get_card(card_id)
    click.echo(f"\n{account.name} (cut-off day {account.cut_off_day}, {account.grace_period_days} grace days)")
    click.echo("-" * 90)
    if not account.charges:
        click.echo("No charges.")
        return
    for charge in account.charges:
        plan = f"MSI {charge.installments.months}" if charge.installments else describe_recurrence(charge.recurrence)
        click.echo(
            f"ID: {charge.id:>4s} | {charge.purchase_date} | {format_money(charge.amount):>12s} | "
            f"{plan:18s} | {charge.description}"
        )


@card_group.command("delete")
@click.argument("card", metavar="CARD")
@click.pass_context
def delete_card(ctx, card: str):
    """Delete a card and all of its charges.

    CARD can be a card name or ID.
    """
    db = ctx.obj["db"]
    service = CardService(db)
    card_id = resolve_card_or_exit(ctx, service, card)

    try:
        service.delete_card(card_id)
        click.echo(f"Deleted card {card}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("charge-add")
@click.argument("card", metavar="CARD")
@click.argument("amount")
@click.argument("description")
@click.option("--date", "date_str", help="Purchase date (defaults to today)")
@click.option("--msi", "months", type=int, help="Split into this many interest-free monthly installments")
@click.option("--frequency", help="Repeat the charge: daily, weekly, biweekly or monthly")
@click.option("--day-of-week", help="Weekday of a weekly charge (name or 0-6, Sunday = 0)")
@click.option("--day-of-month", type=int, help="Day of month of a monthly charge (defaults to the purchase day)")
@click.option("--category", help="Free-form category label")
@click.pass_context
def add_charge(
    ctx,
    card: str,
    amount: str,
    description: str,
    date_str: str | None,
    months: int | None,
    frequency: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
    category: str | None,
):
    """Add a charge to a card.

    CARD can be a card name or ID.

    Examples:
        catorcena card charge-add Oro 1500 "Laptop" --date 2025-01-15 --msi 3
        catorcena card charge-add Oro 199 "Streaming" --frequency monthly
    """
    db = ctx.obj["db"]
    service = CardService(db)
    card_id = resolve_card_or_exit(ctx, service, card)

    purchase = parse_date_or_exit(ctx, date_str, "date") or today_from(ctx)
    recurring = frequency is not None and frequency.strip().lower() not in ONE_OFF_NAMES
    record = {
        "amount": amount,
        "description": description,
        "purchase_date": purchase,
        "category": category,
        "recurrence": "recurring" if recurring else "one-off",
        "frequency": frequency if recurring else None,
        "day_of_week": day_of_week,
        "day_of_month": day_of_month,
        "installment_months": months,
        "is_installment": months is not None,
    }

    try:
        charge_id = service.add_charge(card_id, record)
        click.echo(f"Added charge {charge_id} to card {card}: {description}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("charge-delete")
@click.argument("card", metavar="CARD")
@click.argument("charge_id", metavar="CHARGE_ID")
@click.pass_context
def delete_charge(ctx, card: str, charge_id: str):
    """Delete a charge from a card.

    CARD can be a card name or ID; CHARGE_ID is shown by 'card show'.
    """
    db = ctx.obj["db"]
    service = CardService(db)
    card_id = resolve_card_or_exit(ctx, service, card)

    try:
        service.delete_charge(card_id, charge_id)
        click.echo(f"Deleted charge {charge_id} from card {card}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@card_group.command("installments")
@click.argument("card", metavar="CARD", required=False)
@click.pass_context
def list_installments(ctx, card: str | None):
    """Show the status of MSI purchases.

    Optionally restrict to one CARD (name or ID).
    """
    db = ctx.obj["db"]
    service = CardService(db)
    card_id = resolve_card_or_exit(ctx, service, card) if card is not None else None

    plans = service.installment_plans(today_from(ctx), card_id)
    if not plans:
        click.echo("No MSI purchases found.")
        return

    click.echo("\nMSI purchases:")
    click.echo("-" * 100)
    for account, charge, status in plans:
        click.echo(
            f"{account.name:12s} | {charge.description:20s} | {format_money(charge.amount):>12s} | "
            f"{format_money(status.monthly_amount):>10s}/month | "
            f"paid {status.payments_made}/{charge.installments.months} | "
            f"next {status.next_payment} | ends {status.end_date}"
        )


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
