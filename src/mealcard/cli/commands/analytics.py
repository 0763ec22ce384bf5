"""Analytics commands."""

from datetime import timedelta

import click
from mealcard.cli.date_filters import resolve_cli_date_range
from mealcard.config import resolve_timezone
from mealcard.domain.analytics import AnalyticsService
from mealcard.utils.date_parser import PERIODS


def _display_snapshot(label: str, snapshot) -> None:
    click.echo(f"\n{label}")
    click.echo("-" * 40)
    click.echo(f"Recharges:          {snapshot.total_recharges}")
    click.echo(f"Purchases:          {snapshot.total_purchases}")
    click.echo(f"Revenue:            {snapshot.total_revenue}")
    click.echo(f"Pending requests:   {snapshot.pending_requests}")
    click.echo(f"Approved requests:  {snapshot.approved_requests}")
    click.echo(f"Rejected requests:  {snapshot.rejected_requests}")


@click.command("analytics")
@click.option("--start-date", help="First day (e.g. 2024-01-01, yesterday)")
@click.option("--end-date", help="Last day, inclusive")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--daily", is_flag=True, help="Show one block per day")
@click.option(
    "--timezone",
    envvar="MEALCARD_TIMEZONE",
    help="IANA zone used to cut days (default: server local time)",
)
@click.pass_context
def analytics(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    daily: bool,
    timezone: str | None,
):
    """Show recharge, purchase and request counts.

    Without options, shows today's figures.

    Examples:
        mealcard analytics
        mealcard analytics --period last-week --daily
        mealcard analytics --start-date 2024-03-01 --end-date 2024-03-31 --timezone Asia/Kolkata
    """
    try:
        zone = resolve_timezone(timezone)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    service = AnalyticsService(ctx.obj["db"], timezone=zone)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period, today=service.today()
    )

    if daily:
        days = [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
        for day, snapshot in zip(days, service.daily_series(start, end)):
            _display_snapshot(f"{day:%Y-%m-%d}", snapshot)
        return

    label = f"{start:%Y-%m-%d}" if start == end else f"{start:%Y-%m-%d} to {end:%Y-%m-%d}"
    _display_snapshot(label, service.period_snapshot(start, end))


def register_commands(cli):
    """Register analytics command with main CLI."""
    cli.add_command(analytics, name="analytics")
