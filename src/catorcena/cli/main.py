"""Main CLI entry point."""

import click
from catorcena.cli.log_config import LOG_LEVELS, configure_logging
from catorcena.database.factories import create_sqlite_database
from catorcena.utils.date_parser import parse_date

# Import and register all commands at module level
from catorcena.cli.commands import (
    movement,
    card,
    debit,
    periods,
    paid,
    report,
    export,
    import_cmd,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CATORCENA_DB_PATH environment variable)",
    envvar="CATORCENA_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CATORCENA_LOG_LEVEL",
    help="Minimum level of log events written to stderr",
)
@click.option(
    "--today",
    "today_str",
    help="Reference day for relative dates, installments and yield (defaults to the system date)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, today_str: str | None):
    """Catorcena - Personal finance tracker on 14-day periods.

    Record income and expenses, credit card charges (including MSI
    installment plans) and debit accounts with yield, and see them laid
    out on the catorcena grid of the year.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    today = None
    if today_str is not None:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid --today: {e}", err=True)
            ctx.exit(1)
    ctx.obj["today"] = today

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
movement.register_commands(cli)
card.register_commands(cli)
debit.register_commands(cli)
periods.register_commands(cli)
paid.register_commands(cli)
report.register_commands(cli)
export.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
