"""Cashier purchase path."""

from typing import TYPE_CHECKING

from mealcard.domain.entities import PurchaseReceipt, TransactionKind
from mealcard.domain.errors import (
    CardInactiveError,
    CardNotFoundError,
    MealNotFoundError,
    MealUnavailableError,
    card_inactive,
    card_not_found,
    meal_not_found,
    meal_unavailable,
)
from mealcard.domain.settlement import SettlementService

if TYPE_CHECKING:
    from mealcard.database.base import Database


class PurchaseService:
    """Debit a card for a meal through the settlement engine."""

    def __init__(self, db: "Database"):
        """Initialize purchase service.

        Args:
            db: Database instance
        """
        self.db = db
        self.settlement = SettlementService(db)

    def purchase(self, card_number: str, meal_id: int, actor_ref: str) -> PurchaseReceipt:
        """Sell a meal to the holder of a card.

        The lookups here are only for early, specific errors. The balance and
        active checks that matter are repeated by the settlement at the moment
        the debit is applied.

        Args:
            card_number: Card presented at the counter
            meal_id: Meal being bought
            actor_ref: Cashier processing the sale

        Returns:
            Receipt with the remaining balance and the log entry

        Raises:
            CardNotFoundError: If the card does not exist
            CardInactiveError: If the card is deactivated
            MealNotFoundError: If the meal does not exist
            MealUnavailableError: If the meal is not on sale
            InsufficientFundsError: If the balance does not cover the price
        """
        card = self.db.get_card_by_number(card_number)
        if card is None:
            raise CardNotFoundError(card_not_found(card_number))
        if not card.is_active:
            raise CardInactiveError(card_inactive(card_number))

        meal = self.db.get_meal(meal_id)
        if meal is None:
            raise MealNotFoundError(meal_not_found(meal_id))
        if not meal.is_available:
            raise MealUnavailableError(meal_unavailable(meal.name))

        with self.db.atomic():
            record = self.settlement.settle(
                card_id=card.id,
                kind=TransactionKind.PURCHASE,
                amount=-meal.price,
                description=f"Purchase: {meal.name}",
                processed_by=actor_ref,
            )
            updated = self.db.get_card(card.id)

        return PurchaseReceipt(
            card_number=card.card_number,
            student_ref=card.student_ref,
            meal_name=meal.name,
            new_balance=updated.balance,
            transaction=record,
        )
