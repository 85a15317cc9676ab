"""Movement management commands."""

import click

from catorcena.cli.error_handling import handle_domain_error
from catorcena.cli.recurrence_options import recurrence_options, recurrence_record
from catorcena.domain.entities import Movement, Monthly, OneOff, Weekly, base_date
from catorcena.domain.errors import DomainError
from catorcena.domain.movement import MovementService
from catorcena.utils.amount_parser import format_money
from catorcena.utils.dates import WEEKDAY_NAMES


def describe_recurrence(recurrence) -> str:
    """Short human description of a recurrence."""
    if isinstance(recurrence, OneOff):
        return "one-off"
    label = recurrence.frequency.value
    if isinstance(recurrence, Weekly):
        return f"{label} ({WEEKDAY_NAMES[recurrence.day_of_week]})"
    if isinstance(recurrence, Monthly) and recurrence.day_of_month is not None:
        return f"{label} (day {recurrence.day_of_month})"
    return label


def _format_movement(movement: Movement) -> str:
    return (
        f"ID: {movement.id:>4s} | {movement.kind.value:7s} | "
        f"{format_money(movement.amount):>12s} | {base_date(movement.recurrence)} | "
        f"{describe_recurrence(movement.recurrence):18s} | {movement.description}"
    )


@click.group()
def movement_group():
    """Manage general income and expense movements."""
    pass


@movement_group.command("add")
@click.argument("kind", type=click.Choice(["income", "expense", "ingreso", "gasto"], case_sensitive=False))
@click.argument("amount")
@click.argument("description")
@click.option("--category", help="Free-form category label")
@recurrence_options
@click.pass_context
def add_movement(
    ctx,
    kind: str,
    amount: str,
    description: str,
    category: str | None,
    date_str: str | None,
    frequency: str | None,
    start_date: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
):
    """Add an income or expense movement.

    Without --frequency the movement happens once on --date (default today).

    Examples:
        catorcena movement add expense 250 "Groceries" --date 2025-03-03
        catorcena movement add income 15000 "Salary" --frequency biweekly --start-date 2025-01-10
        catorcena movement add expense 120 "Gym" --frequency weekly --day-of-week lunes
        catorcena movement add expense 8000 "Rent" --frequency monthly --day-of-month 1
    """
    db = ctx.obj["db"]
    service = MovementService(db)

    record = {"kind": kind, "amount": amount, "description": description, "category": category}
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
        movement_id = service.create_movement(record)
        click.echo(f"Created movement {movement_id}: {description}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@movement_group.command("list")
@click.option("--kind", type=click.Choice(["income", "expense"]), help="Only list one kind")
@click.pass_context
def list_movements(ctx, kind: str | None):
    """List all movements."""
    db = ctx.obj["db"]
    service = MovementService(db)

    movements = service.list_movements()
    if kind is not None:
        movements = [m for m in movements if m.kind.value == kind]
    if not movements:
        click.echo("No movements found.")
        return

    click.echo("\nMovements:")
    click.echo("-" * 90)
    for movement in movements:
        click.echo(_format_movement(movement))


@movement_group.command("edit")
@click.argument("movement_id", metavar="MOVEMENT_ID")
@click.option("--kind", type=click.Choice(["income", "expense", "ingreso", "gasto"], case_sensitive=False))
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@click.option("--category", help="New category")
@recurrence_options
@click.pass_context
def edit_movement(
    ctx,
    movement_id: str,
    kind: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    date_str: str | None,
    frequency: str | None,
    start_date: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
):
    """Edit a movement in place; options that are not given keep their value.

    Examples:
        catorcena movement edit 3 --amount 9000
        catorcena movement edit 3 --frequency monthly --day-of-month 15
    """
    db = ctx.obj["db"]
    service = MovementService(db)

    changes = {"kind": kind, "amount": amount, "description": description, "category": category}
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
        movement = service.update_movement(movement_id, changes)
        click.echo(f"Updated movement {movement_id}")
        click.echo(_format_movement(movement))
    except DomainError as e:
        handle_domain_error(ctx, e)


@movement_group.command("delete")
@click.argument("movement_id", metavar="MOVEMENT_ID")
@click.pass_context
def delete_movement(ctx, movement_id: str):
    """Delete a movement."""
    db = ctx.obj["db"]
    service = MovementService(db)

    try:
        service.delete_movement(movement_id)
        click.echo(f"Deleted movement {movement_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register movement commands with main CLI."""
    cli.add_command(movement_group, name="movement")
