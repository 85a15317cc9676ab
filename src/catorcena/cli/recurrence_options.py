"""Shared CLI options describing when a movement or charge happens."""

from typing import Any

import click

from catorcena.cli.date_options import parse_date_or_exit, today_from
from catorcena.domain.records import ONE_OFF_NAMES


def recurrence_options(func):
    """Add --date, --frequency, --start-date, --day-of-week and --day-of-month."""
    options = [
        click.option("--date", "date_str", help="Date of a one-off entry (defaults to today)"),
        click.option(
            "--frequency",
            help="daily, weekly, biweekly or monthly (diario, semanal, catorcenal, mensual); "
            "omit for a one-off entry",
        ),
        click.option("--start-date", help="First day of a recurring entry (defaults to today)"),
        click.option("--day-of-week", help="Weekday of a weekly entry (name or 0-6, Sunday = 0)"),
        click.option("--day-of-month", type=int, help="Day of month of a monthly entry"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def recurrence_record(
    ctx: click.Context,
    *,
    date_str: str | None,
    frequency: str | None,
    start_date: str | None,
    day_of_week: str | None,
    day_of_month: int | None,
    defaults: bool = True,
) -> dict[str, Any]:
    """Build the recurrence fields of a record from CLI options.

    With defaults, missing dates fall back to the reference day. Without,
    only the options that were given are returned (for edits).
    """
    record: dict[str, Any] = {}
    recurring = frequency is not None and frequency.strip().lower() not in ONE_OFF_NAMES
    if frequency is not None:
        record["recurrence"] = "recurring" if recurring else "one-off"
        record["frequency"] = frequency if recurring else None

    day = parse_date_or_exit(ctx, date_str, "date")
    start = parse_date_or_exit(ctx, start_date, "start date")
    if defaults:
        if recurring:
            start = start or today_from(ctx)
        else:
            record.setdefault("recurrence", "one-off")
            day = day or today_from(ctx)

    for field, value in (
        ("date", day),
        ("start_date", start),
        ("day_of_week", day_of_week),
        ("day_of_month", day_of_month),
    ):
        if value is not None:
            record[field] = value
    return record
