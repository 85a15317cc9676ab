"""CLI helpers for date arguments."""

from datetime import date

import click

from catorcena.utils.date_parser import parse_date


def today_from(ctx: click.Context) -> date:
    """Return the reference day set on the root command (--today), or today."""
    return ctx.find_root().obj.get("today") or date.today()


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse an optional CLI date relative to the reference day, or exit."""
    if value is None:
        return None
    try:
        return parse_date(value, today=today_from(ctx))
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
