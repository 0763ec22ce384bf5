"""CLI helpers for date range resolution."""

from datetime import date

import click

from mealcard.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    today: date,
) -> tuple[date, date]:
    """Resolve CLI date range from a period name or explicit dates.

    Missing bounds default to today, so no options at all means today only.
    """
    if period is not None and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period is not None:
        return get_date_range(period, today=today)

    start = today
    end = today

    if start_date:
        try:
            start = parse_date(start_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)
        if not end_date:
            end = start

    if end_date:
        try:
            end = parse_date(end_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if end < start:
        click.echo("Error: End date must not be before start date.", err=True)
        ctx.exit(1)

    return start, end
