"""Ledger audit commands."""

import click
from mealcard.cli.error_handling import handle_domain_error
from mealcard.domain.card import CardService
from mealcard.domain.errors import DomainError
from mealcard.domain.reconciliation import ReconciliationService


@click.group()
def ledger_group():
    """Audit balances against the transaction log."""
    pass


@ledger_group.command("verify")
@click.argument("card_number", required=False)
@click.pass_context
def verify(ctx, card_number: str | None):
    """Check that balances equal the sum of their transactions.

    Checks every card unless CARD_NUMBER is given. Exits with status 1 if
    any card disagrees with its log.
    """
    db = ctx.obj["db"]
    service = ReconciliationService(db)

    if card_number is not None:
        try:
            card = CardService(db).require_card_by_number(card_number)
            result = service.verify_card(card.id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        mismatches = [] if result.is_consistent else [result]
    else:
        mismatches = service.verify_all()

    if not mismatches:
        click.echo("Ledger consistent.")
        return

    for result in mismatches:
        click.echo(
            f"MISMATCH {result.card_number}: balance {result.balance}, log total {result.log_total}",
            err=True,
        )
    ctx.exit(1)


@ledger_group.command("totals")
@click.pass_context
def totals(ctx):
    """Show card counts and total outstanding balance."""
    service = ReconciliationService(ctx.obj["db"])
    result = service.totals()
    click.echo(f"Cards:          {result.card_count}")
    click.echo(f"Active cards:   {result.active_card_count}")
    click.echo(f"Total balance:  {result.total_balance}")


@ledger_group.command("transactions")
@click.option("--limit", type=click.IntRange(min=1), default=100, show_default=True)
@click.pass_context
def recent_transactions(ctx, limit: int):
    """Show the most recent transactions across all cards."""
    service = CardService(ctx.obj["db"])

    transactions = service.list_recent_transactions(limit=limit)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo("\nRecent transactions:")
    click.echo("-" * 70)
    for txn in transactions:
        actor = f" | by {txn.processed_by}" if txn.processed_by else ""
        click.echo(
            f"{txn.created_at:%Y-%m-%d %H:%M} | card {txn.card_id:3d} | {txn.kind.value:8s} | "
            f"{txn.amount:+7d} | {txn.description or ''}{actor}"
        )


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
