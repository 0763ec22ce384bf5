"""CLI error handling helpers."""

import click

from mealcard.domain.errors import DomainError, TransientError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, TransientError):
        click.echo("The operation was not applied; it is safe to retry.", err=True)
    ctx.exit(1)
