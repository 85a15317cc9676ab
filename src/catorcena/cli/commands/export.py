"""CSV export command."""

from pathlib import Path

import click

from catorcena.cli.commands.periods import echo_warnings
from catorcena.cli.date_options import today_from
from catorcena.domain.entities import AmountModel
from catorcena.domain.export import (
    EXPENSE_COLUMNS,
    MSI_COLUMNS,
    PERIOD_COLUMNS,
    PERIOD_TOTAL_COLUMNS,
    expense_table_rows,
    msi_table_rows,
    period_rows,
    period_total_rows,
    write_csv,
)
from catorcena.domain.reports import ReportService
from catorcena.domain.summary import SummaryService


@click.command("export")
@click.argument("directory", type=click.Path(file_okay=False))
@click.option("--year", type=int, help="Year of the period grid (defaults to the current year)")
@click.option(
    "--model",
    type=click.Choice([m.value for m in AmountModel]),
    default=AmountModel.ENUMERATED.value,
    show_default=True,
    help="Amount model of recurring movements",
)
@click.pass_context
def export_csv(ctx, directory: str, year: int | None, model: str):
    """Export periods and reports as CSV files into DIRECTORY.

    Writes periods.csv (one row per item), period_totals.csv, expenses.csv,
    recurring.csv and msi.csv.
    """
    db = ctx.obj["db"]
    today = today_from(ctx)
    out = Path(directory)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        click.echo(f"Error: Cannot create {directory}: {e}", err=True)
        ctx.exit(1)

    report = SummaryService(db).build_report(year or today.year, AmountModel(model))
    echo_warnings(report.warnings)
    reports = ReportService(db)
    purchases, _ = reports.msi(today)

    files = [
        ("periods.csv", period_rows(report.summaries), PERIOD_COLUMNS),
        ("period_totals.csv", period_total_rows(report.summaries), PERIOD_TOTAL_COLUMNS),
        ("expenses.csv", expense_table_rows(reports.expenses()), EXPENSE_COLUMNS),
        ("recurring.csv", expense_table_rows(reports.recurring()), EXPENSE_COLUMNS),
        ("msi.csv", msi_table_rows(purchases), MSI_COLUMNS),
    ]
    for name, rows, columns in files:
        count = write_csv(out / name, rows, columns)
        click.echo(f"Wrote {count} rows to {out / name}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_csv)
