"""Main CLI entry point."""

import logging

import click

from mealcard.config import load_settings
from mealcard.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from mealcard.cli.commands import (
    card,
    meal,
    recharge,
    purchase,
    analytics,
    ledger,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MEALCARD_DB_PATH environment variable)",
    envvar="MEALCARD_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="MEALCARD_LOG_LEVEL",
    help="Logging level (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Mealcard - Stored-value meal card ledger.

    Issue cards to students, approve recharge requests, and process
    cashier purchases against card balances.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_settings()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path is not None:
            db = create_sqlite_database(database_path=db_path, timeout=settings.db_timeout)
        else:
            db = create_database(settings)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
card.register_commands(cli)
meal.register_commands(cli)
recharge.register_commands(cli)
purchase.register_commands(cli)
analytics.register_commands(cli)
ledger.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
