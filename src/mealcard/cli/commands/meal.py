"""Meal catalogue commands."""

import click
from mealcard.cli.error_handling import handle_domain_error
from mealcard.domain.errors import DomainError
from mealcard.domain.meal import MealService
from mealcard.utils.amount_parser import parse_amount


def _parse_price(ctx, price: str) -> int:
    try:
        return parse_amount(price)
    except ValueError as e:
        click.echo(f"Error: Invalid price: {e}", err=True)
        ctx.exit(1)


@click.group()
def meal_group():
    """Manage the meal catalogue."""
    pass


@meal_group.command("add")
@click.argument("name")
@click.option("--price", required=True, help="Price in whole currency units")
@click.option("--category", required=True, help="Category label (e.g. Lunch)")
@click.option("--description", help="Optional description")
@click.pass_context
def add_meal(ctx, name: str, price: str, category: str, description: str | None):
    """Add a meal to the catalogue.

    Examples:
        mealcard meal add "Veg Thali" --price 60 --category Lunch
    """
    service = MealService(ctx.obj["db"])
    amount = _parse_price(ctx, price)

    try:
        meal_id = service.create_meal(
            name=name, price=amount, category=category, description=description
        )
        click.echo(f"Created meal '{name}' (ID: {meal_id}) priced {amount}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@meal_group.command("list")
@click.option("--available", is_flag=True, help="Only show meals currently on sale")
@click.pass_context
def list_meals(ctx, available: bool):
    """List meals."""
    service = MealService(ctx.obj["db"])

    meals = service.list_meals(available_only=available)
    if not meals:
        click.echo("No meals found.")
        return

    click.echo("\nMeals:")
    click.echo("-" * 60)
    for meal in meals:
        status = "" if meal.is_available else " (unavailable)"
        click.echo(
            f"ID: {meal.id:3d} | {meal.name:20s} | {meal.category:10s} | {meal.price:5d}{status}"
        )


@meal_group.command("update")
@click.argument("meal_id", type=int)
@click.option("--name", help="New name")
@click.option("--price", help="New price")
@click.option("--category", help="New category")
@click.option("--description", help="New description")
@click.option("--available/--unavailable", default=None, help="Put on or take off sale")
@click.pass_context
def update_meal(
    ctx,
    meal_id: int,
    name: str | None,
    price: str | None,
    category: str | None,
    description: str | None,
    available: bool | None,
):
    """Update a meal.

    Examples:
        mealcard meal update 3 --price 70
        mealcard meal update 3 --unavailable
    """
    service = MealService(ctx.obj["db"])
    amount = _parse_price(ctx, price) if price is not None else None

    try:
        meal = service.update_meal(
            meal_id,
            name=name,
            price=amount,
            category=category,
            description=description,
            is_available=available,
        )
        click.echo(f"Updated meal '{meal.name}' (ID: {meal.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@meal_group.command("remove")
@click.argument("meal_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_meal(ctx, meal_id: int, yes: bool):
    """Remove a meal from the catalogue.

    Past purchases keep their description, so history is unaffected.
    """
    service = MealService(ctx.obj["db"])

    meal = service.get_meal(meal_id)
    if meal is None:
        click.echo(f"Error: Meal {meal_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to remove meal '{meal.name}'?"):
        click.echo("Removal cancelled.")
        return

    try:
        service.delete_meal(meal_id)
        click.echo(f"Removed meal '{meal.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register meal commands with main CLI."""
    cli.add_command(meal_group, name="meal")
