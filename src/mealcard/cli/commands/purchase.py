"""Cashier purchase command."""

import click
from mealcard.cli.error_handling import handle_domain_error
from mealcard.domain.errors import DomainError
from mealcard.domain.purchase import PurchaseService


@click.command("purchase")
@click.argument("card_number")
@click.argument("meal_id", type=int)
@click.option("--actor", required=True, help="Cashier processing the sale")
@click.pass_context
def purchase(ctx, card_number: str, meal_id: int, actor: str):
    """Charge a card for a meal.

    Examples:
        mealcard purchase CARD-0002 3 --actor cashier1
    """
    service = PurchaseService(ctx.obj["db"])

    try:
        receipt = service.purchase(card_number, meal_id, actor)
        click.echo(f"Purchase successful: {receipt.meal_name} for {-receipt.transaction.amount}")
        click.echo(f"Student: {receipt.student_ref}")
        click.echo(f"Remaining balance: {receipt.new_balance}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register purchase command with main CLI."""
    cli.add_command(purchase, name="purchase")
