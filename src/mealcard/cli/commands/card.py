"""Card management commands."""

import click
from mealcard.cli.card_resolution import resolve_card_or_exit
from mealcard.cli.error_handling import handle_domain_error
from mealcard.domain.card import CardService
from mealcard.domain.card_import import CardImportService
from mealcard.domain.errors import DomainError


def _card_service(ctx) -> CardService:
    settings = ctx.obj["settings"]
    return CardService(ctx.obj["db"], starting_balance=settings.starting_balance)


def _format_card(card) -> str:
    status = "active" if card.is_active else "inactive"
    return f"{card.card_number} | Student: {card.student_ref} | Balance: {card.balance} | {status}"


@click.group()
def card_group():
    """Manage meal cards."""
    pass


@card_group.command("issue")
@click.argument("student_ref", metavar="STUDENT")
@click.option("--number", "card_number", help="Card number (generated if not provided)")
@click.option(
    "--starting-balance",
    type=click.IntRange(min=0),
    help="Opening grant (defaults to MEALCARD_STARTING_BALANCE)",
)
@click.pass_context
def issue_card(ctx, student_ref: str, card_number: str | None, starting_balance: int | None):
    """Issue a meal card to a student.

    Examples:
        mealcard card issue S1001
        mealcard card issue S1002 --number CARD-0002 --starting-balance 100
    """
    service = _card_service(ctx)

    try:
        card = service.issue_card(
            student_ref=student_ref, card_number=card_number, starting_balance=starting_balance
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Issued card {card.card_number} to student '{student_ref}' (ID: {card.id})")
    click.echo(f"Balance: {card.balance}")


@card_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_cards(ctx, csv_file: str):
    """Issue cards for every student listed in a CSV file.

    The file needs a student_ref column; card_number and starting_balance
    columns are optional. Rejected rows are reported and skipped.

    Examples:
        mealcard card import roster.csv
    """
    settings = ctx.obj["settings"]
    service = CardImportService(ctx.obj["db"], starting_balance=settings.starting_balance)

    try:
        result = service.import_csv(csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    click.echo(f"  Issued: {len(result.issued)} cards")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


@card_group.command("show")
@click.argument("card_number", required=False)
@click.option("--student", "student_ref", help="Look up the card by owning student")
@click.pass_context
def show_card(ctx, card_number: str | None, student_ref: str | None):
    """Show a card's balance and status.

    Examples:
        mealcard card show CARD-0002
        mealcard card show --student S1002
    """
    service = _card_service(ctx)
    card = resolve_card_or_exit(ctx, service, card_number, student_ref)
    click.echo(_format_card(card))


@card_group.command("list")
@click.pass_context
def list_cards(ctx):
    """List all cards."""
    service = _card_service(ctx)

    cards = service.list_cards()
    if not cards:
        click.echo("No cards found.")
        return

    click.echo("\nCards:")
    click.echo("-" * 70)
    for card in cards:
        click.echo(f"ID: {card.id:3d} | {_format_card(card)}")


@card_group.command("deactivate")
@click.argument("card_number")
@click.pass_context
def deactivate_card(ctx, card_number: str):
    """Deactivate a card. The card and its history are kept."""
    service = _card_service(ctx)
    try:
        service.deactivate_card(card_number)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated card {card_number}")


@card_group.command("activate")
@click.argument("card_number")
@click.pass_context
def activate_card(ctx, card_number: str):
    """Reactivate a deactivated card."""
    service = _card_service(ctx)
    try:
        service.activate_card(card_number)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Activated card {card_number}")


@card_group.command("history")
@click.argument("card_number", required=False)
@click.option("--student", "student_ref", help="Look up the card by owning student")
@click.option("--limit", type=click.IntRange(min=1), help="Maximum number of entries")
@click.pass_context
def card_history(ctx, card_number: str | None, student_ref: str | None, limit: int | None):
    """Show a card's transactions, newest first."""
    service = _card_service(ctx)
    card = resolve_card_or_exit(ctx, service, card_number, student_ref)

    transactions = service.list_transactions(card.id, limit=limit)
    if not transactions:
        click.echo(f"No transactions for card {card.card_number}.")
        return

    click.echo(f"\nTransactions for {card.card_number} (balance {card.balance}):")
    click.echo("-" * 70)
    for txn in transactions:
        actor = f" | by {txn.processed_by}" if txn.processed_by else ""
        click.echo(
            f"{txn.created_at:%Y-%m-%d %H:%M} | {txn.kind.value:8s} | {txn.amount:+7d} | "
            f"{txn.description or ''}{actor}"
        )


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
