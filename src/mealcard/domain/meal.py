"""Meal catalogue domain service."""

from typing import Optional, Any, TYPE_CHECKING

from mealcard.domain.entities import Meal as MealEntity
from mealcard.domain.errors import (
    InvalidAmountError,
    MealNotFoundError,
    ValidationError,
    meal_not_found,
)

if TYPE_CHECKING:
    from mealcard.database.base import Database


def _validate_price(price: int) -> None:
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise InvalidAmountError(f"Meal price must be a positive integer, got {price!r}")


class MealService:
    """Service for managing the meals a cashier can sell."""

    def __init__(self, db: "Database"):
        """Initialize meal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_meal(
        self, name: str, price: int, category: str, description: Optional[str] = None
    ) -> int:
        """Create a meal.

        Args:
            name: Meal name
            price: Price in whole currency units
            category: Category label (e.g. "Lunch")
            description: Optional description

        Returns:
            Meal ID

        Raises:
            ValidationError: If name or category is blank
            InvalidAmountError: If price is not positive
        """
        name = (name or "").strip()
        category = (category or "").strip()
        if not name:
            raise ValidationError("Meal name cannot be empty")
        if not category:
            raise ValidationError("Meal category cannot be empty")
        _validate_price(price)

        return self.db.create_meal(name=name, price=price, category=category, description=description)

    def get_meal(self, meal_id: int) -> Optional[MealEntity]:
        """Get meal by ID."""
        return self.db.get_meal(meal_id)

    def list_meals(self, available_only: bool = False) -> list[MealEntity]:
        """List meals, optionally only those on sale."""
        return self.db.list_meals(available_only=available_only)

    def update_meal(
        self,
        meal_id: int,
        name: Optional[str] = None,
        price: Optional[int] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        is_available: Optional[bool] = None,
    ) -> MealEntity:
        """Update a meal. Only arguments that are not None are changed.

        Raises:
            MealNotFoundError: If the meal does not exist
            ValidationError: If name or category is blank
            InvalidAmountError: If price is not positive
        """
        fields: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Meal name cannot be empty")
            fields["name"] = name.strip()
        if price is not None:
            _validate_price(price)
            fields["price"] = price
        if category is not None:
            if not category.strip():
                raise ValidationError("Meal category cannot be empty")
            fields["category"] = category.strip()
        if description is not None:
            fields["description"] = description
        if is_available is not None:
            fields["is_available"] = is_available

        if self.db.get_meal(meal_id) is None:
            raise MealNotFoundError(meal_not_found(meal_id))
        if fields:
            self.db.update_meal(meal_id, fields)
        return self.db.get_meal(meal_id)

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal. Past purchases keep their description text."""
        if self.db.get_meal(meal_id) is None:
            raise MealNotFoundError(meal_not_found(meal_id))
        self.db.delete_meal(meal_id)
