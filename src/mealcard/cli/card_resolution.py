"""CLI helpers for card resolution and error handling."""

from __future__ import annotations

import click
from mealcard.domain.card import CardService
from mealcard.domain.entities import Card
from mealcard.domain.errors import DomainError


def resolve_card_or_exit(
    ctx: click.Context,
    card_service: CardService,
    card_number: str | None,
    student_ref: str | None = None,
) -> Card:
    """Resolve a card by number or owning student, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    if (card_number is None) == (student_ref is None):
        click.echo("Error: Specify either a card number or --student, not both.", err=True)
        ctx.exit(1)

    try:
        if card_number is not None:
            return card_service.require_card_by_number(card_number)
        return card_service.require_card_for_student(student_ref)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
