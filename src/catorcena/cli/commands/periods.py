"""Period grid summary command."""

import click

from catorcena.cli.date_options import today_from
from catorcena.domain.entities import AmountModel, DataWarning, PeriodSummary
from catorcena.domain.periods import PERIODS_PER_YEAR, period_index_for
from catorcena.domain.summary import SummaryService
from catorcena.utils.amount_parser import format_money


def echo_warnings(warnings: tuple[DataWarning, ...]) -> None:
    """Report records left out of the computation."""
    for warning in warnings:
        click.echo(
            f"Warning: skipped {warning.source} {warning.record_id}: {warning.message}",
            err=True,
        )


def _echo_totals(summaries: list[PeriodSummary]) -> None:
    click.echo(
        f"\n{'#':>3s} | {'Start':10s} | {'End':10s} | {'Income':>12s} | {'Expenses':>12s} | "
        f"{'Cards':>12s} | {'Balance':>12s} | {'Running':>12s}"
    )
    click.echo("-" * 104)
    for s in summaries:
        click.echo(
            f"{s.period.index + 1:3d} | {s.period.start} | {s.period.end} | "
            f"{format_money(s.income_total):>12s} | {format_money(s.expense_total):>12s} | "
            f"{format_money(s.card_charge_total):>12s} | {format_money(s.balance):>12s} | "
            f"{format_money(s.running_balance):>12s}"
        )


def _echo_detail(summary: PeriodSummary) -> None:
    period = summary.period
    click.echo(f"\nCatorcena {period.index + 1}: {period.start} to {period.end}")
    click.echo("-" * 90)
    if not summary.items:
        click.echo("No movements or charges in this period.")
    for item in sorted(summary.items, key=lambda i: (i.date, i.item_id)):
        sign = "+" if item.kind.value == "income" else "-"
        origin = f"TC: {item.card_name}" if item.card_name else "General"
        paid = "[x]" if item.paid else "[ ]"
        recurring = " (recurring)" if item.recurring else ""
        click.echo(
            f"{paid} {item.date} | {sign}{format_money(item.amount):>12s} | {origin:15s} | "
            f"{item.description}{recurring} | ID: {item.item_id}"
        )

    if summary.card_totals:
        click.echo("\nCard payments:")
        for total in summary.card_totals:
            click.echo(f"  {total.name:15s} {format_money(total.total):>12s}")

    click.echo("-" * 90)
    click.echo(f"Income:          {format_money(summary.income_total):>12s}")
    click.echo(f"Expenses:        {format_money(summary.expense_total):>12s}")
    click.echo(f"Card payments:   {format_money(summary.card_charge_total):>12s}")
    click.echo(f"Balance:         {format_money(summary.balance):>12s}")
    click.echo(f"Running balance: {format_money(summary.running_balance):>12s}")


@click.command("periods")
@click.option("--year", type=int, help="Year of the period grid (defaults to the current year)")
@click.option(
    "--period",
    "period_number",
    type=click.IntRange(1, PERIODS_PER_YEAR),
    help="Show the items of one catorcena (1-26)",
)
@click.option("--current", is_flag=True, help="Show the items of the catorcena containing today")
@click.option(
    "--model",
    type=click.Choice([m.value for m in AmountModel]),
    default=AmountModel.ENUMERATED.value,
    show_default=True,
    help="enumerated counts real occurrences; scaled applies daily x14 and weekly x2",
)
@click.pass_context
def periods(ctx, year: int | None, period_number: int | None, current: bool, model: str):
    """Summarize the catorcenas of a year.

    Examples:
        catorcena periods
        catorcena periods --year 2025 --period 5
        catorcena periods --current
    """
    db = ctx.obj["db"]
    service = SummaryService(db)
    today = today_from(ctx)

    if period_number is not None and current:
        click.echo("Error: --period and --current cannot be combined.", err=True)
        ctx.exit(1)

    report = service.build_report(year or today.year, AmountModel(model))
    echo_warnings(report.warnings)
    summaries = list(report.summaries)

    if current:
        index = period_index_for([s.period for s in summaries], today)
        if index is None:
            click.echo(f"Error: {today} is not inside any catorcena of {report.year}.", err=True)
            ctx.exit(1)
        period_number = index + 1

    if period_number is not None:
        _echo_detail(summaries[period_number - 1])
    else:
        click.echo(f"Catorcenas {report.year}")
        _echo_totals(summaries)


def register_commands(cli):
    """Register the periods command with main CLI."""
    cli.add_command(periods)
