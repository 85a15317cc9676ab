"""Debit account commands."""

from decimal import Decimal

import click

from catorcena.cli.account_resolution import resolve_debit_account_or_exit
from catorcena.cli.commands.movement import describe_recurrence
from catorcena.cli.date_options import parse_date_or_exit, today_from
from catorcena.cli.error_handling import handle_domain_error
from catorcena.cli.recurrence_options import recurrence_options, recurrence_record
from catorcena.domain.debit import DebitAccountService
from catorcena.domain.entities import base_date
from catorcena.domain.errors import DomainError
from catorcena.domain.yields import accrue_yield
from catorcena.utils.amount_parser import format_money, round_money


@click.group()
def debit_group():
    """Manage debit accounts, their movements and yield."""
    pass


@debit_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--yield-rate", help="Annual yield rate in percent (enables yield)")
@click.option("--cap", "cap_amount", help="Only this much capital earns yield")
@click.option(
    "--accrual",
    type=click.Choice(["daily", "monthly"]),
    default="monthly",
    show_default=True,
    help="How often yield accrues",
)
@click.option("--accrual-start", help="First accrual day (defaults to today)")
@click.pass_context
def create_account(
    ctx,
    name: str,
    yield_rate: str | None,
    cap_amount: str | None,
    accrual: str,
    accrual_start: str | None,
):
    """Create a new debit account.

    Examples:
        catorcena debit create "Nomina"
        catorcena debit create "Ahorro" --yield-rate 10.5 --cap 25000 --accrual daily
    """
    db = ctx.obj["db"]
    service = DebitAccountService(db)

    settings = {
        "enabled": yield_rate is not None,
        "annual_rate_percent": yield_rate,
        "capped": cap_amount is not None,
        "cap_amount": cap_amount,
        "accrual_frequency": accrual,
        "last_accrual_date": parse_date_or_exit(ctx, accrual_start, "accrual start"),
    }

    try:
        account_id = service.create_account(name, today=today_from(ctx), yield_settings=settings)
        click.echo(f"Created debit account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@debit_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List debit accounts with balance and pending yield."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    today = today_from(ctx)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No debit accounts found.")
        return

    click.echo("\nDebit accounts:")
    click.echo("-" * 90)
    for account in accounts:
        config = account.yield_config
        rate = f"{config.annual_rate_percent}% {config.accrual_frequency.value}" if config.enabled else "no yield"
        click.echo(
            f"ID: {account.id:>3s} | {account.name:15s} | Balance: {format_money(service.balance(account, today))} | "
            f"Pending yield: {format_money(service.projected_yield(account, today))} | {rate}"
        )


@debit_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show the movements of a debit account.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    debit = service.get_account(account_id)
    click.echo(f"\n{debit.name}")
    click.echo("-" * 90)
    if not debit.movements:
        click.echo("No movements.")
        return
    for movement in debit.movements:
        marker = " [yield]" if movement.is_yield else ""
        click.echo(
            f"ID: {movement.id:>4s} | {movement.kind.value:7s} | {format_money(movement.amount):>12s} | "
            f"{base_date(movement.recurrence)} | {describe_recurrence(movement.recurrence):18s} | "
            f"{movement.description}{marker}"
        )


@debit_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str):
    """Delete a debit account and all of its movements."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted debit account {account}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@debit_group.command("movement-add")
@click.argument("account", metavar="ACCOUNT")
@click.argument("kind", type=click.Choice(["income", "expense", "ingreso", "gasto"], case_sensitive=False))
@click.argument("amount")
@click.argument("description")
@recurrence_options
@click.pass_context
def add_movement(
    ctx,
    account: str,
    kind: str,
    amount: str,
    description: str,
    date_str: str | None,
    frequency: str | None,
    start_date: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
):
    """Add a movement to a debit account.

    Examples:
        catorcena debit movement-add Ahorro income 20000 "Deposit" --date 2025-01-01
    """
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    record = {"kind": kind, "amount": amount, "description": description}
    record.update(
        recurrence_record(
            ctx,
            date_str=date_str,
            frequency=frequency,
            start_date=start_date,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
        )
    )

    try:
        movement_id = service.add_movement(account_id, record)
        click.echo(f"Added movement {movement_id} to {account}: {description}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@debit_group.command("movement-edit")
@click.argument("account", metavar="ACCOUNT")
@click.argument("movement_id", metavar="MOVEMENT_ID")
@click.option("--kind", type=click.Choice(["income", "expense", "ingreso", "gasto"], case_sensitive=False))
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@recurrence_options
@click.pass_context
def edit_movement(
    ctx,
    account: str,
    movement_id: str,
    kind: str | None,
    amount: str | None,
    description: str | None,
    date_str: str | None,
    frequency: str | None,
    start_date: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
):
    """Edit a debit movement; options that are not given keep their value."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    changes = {"kind": kind, "amount": amount, "description": description}
    changes.update(
        recurrence_record(
            ctx,
            date_str=date_str,
            frequency=frequency,
            start_date=start_date,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
            defaults=False,
        )
    )

    try:
        service.update_movement(account_id, movement_id, changes)
        click.echo(f"Updated movement {movement_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@debit_group.command("movement-delete")
@click.argument("account", metavar="ACCOUNT")
@click.argument("movement_id", metavar="MOVEMENT_ID")
@click.pass_context
def delete_movement(ctx, account: str, movement_id: str):
    """Delete a debit movement, settled yield entries included."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    try:
        service.delete_movement(account_id, movement_id)
        click.echo(f"Deleted movement {movement_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@debit_group.command("yield")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_yield(ctx, account: str):
    """Show the yield accrued since the last settlement (not yet counted)."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    debit = service.get_account(account_id)
    entries = accrue_yield(debit, today_from(ctx))
    if not entries:
        click.echo("No pending yield.")
        return

    click.echo(f"\nPending yield for {debit.name}:")
    click.echo("-" * 40)
    for entry in entries:
        click.echo(f"{entry.date} | {format_money(round_money(entry.amount)):>12s}")
    total = sum((entry.amount for entry in entries), Decimal("0"))
    click.echo("-" * 40)
    click.echo(f"Total      | {format_money(round_money(total)):>12s}")


@debit_group.command("settle")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def settle_yield(ctx, account: str):
    """Store the pending yield as income movements of the account."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)

    try:
        settled = service.settle_yield(account_id, today_from(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not settled:
        click.echo("No new yield to settle.")
        return
    click.echo(f"Settled {len(settled)} yield entr{'y' if len(settled) == 1 else 'ies'}")


@debit_group.command("project")
@click.argument("account", metavar="ACCOUNT")
@click.argument("target_date", metavar="TARGET_DATE")
@click.option("--rate", help="Annual rate in percent to simulate (defaults to the account rate)")
@click.pass_context
def project_balance(ctx, account: str, target_date: str, rate: str | None):
    """Project the balance to TARGET_DATE with daily compounding.

    Examples:
        catorcena debit project Ahorro 2026-12-31
        catorcena debit project Ahorro 2026-12-31 --rate 10
    """
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)
    target = parse_date_or_exit(ctx, target_date, "target date")
    today = today_from(ctx)

    try:
        debit = service.get_account(account_id)
        projected = service.project(debit, target, today, rate)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Balance today ({today}): {format_money(service.balance(debit, today))}")
    click.echo(f"Projected on {target}: {format_money(projected)}")


@debit_group.command("series")
@click.argument("account", metavar="ACCOUNT")
@click.option("--start-date", help="First day to include")
@click.option("--end-date", help="Last day to include")
@click.pass_context
def show_series(ctx, account: str, start_date: str | None, end_date: str | None):
    """Show the dated income, expense and yield series of an account."""
    db = ctx.obj["db"]
    service = DebitAccountService(db)
    account_id = resolve_debit_account_or_exit(ctx, service, account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    debit = service.get_account(account_id)
    points = service.series(debit, today_from(ctx), start, end)
    if not points:
        click.echo("No movements in range.")
        return

    click.echo(f"\n{'Date':10s} | {'Income':>12s} | {'Expense':>12s} | {'Yield':>10s} | {'Projected':>10s} | {'Balance':>12s}")
    click.echo("-" * 84)
    for p in points:
        click.echo(
            f"{p.date} | {format_money(p.income):>12s} | {format_money(p.expense):>12s} | "
            f"{format_money(p.settled_yield):>10s} | {format_money(round_money(p.projected_yield)):>10s} | "
            f"{format_money(p.running_balance):>12s}"
        )


def register_commands(cli):
    """Register debit account commands with main CLI."""
    cli.add_command(debit_group, name="debit")
