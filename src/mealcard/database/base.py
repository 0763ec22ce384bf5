"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional, Any

# Import entities directly to avoid circular import through domain/__init__.py
from mealcard.domain.entities import (
    Card,
    TransactionRecord,
    RechargeRequest,
    Meal,
    LedgerTotals,
)


class Database(ABC):
    """Abstract database interface for mealcard.

    Every method runs in its own transaction unless it is called inside
    ``atomic()``, in which case it joins the enclosing unit of work.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open a unit of work; nested calls join the outermost one.

        The outermost unit commits on success and rolls back on any
        exception. Store failures surface as StoreUnavailableError.
        """
        pass

    # Card operations
    @abstractmethod
    def create_card(self, card_number: str, student_ref: str) -> int:
        """Create a card with zero balance. Returns card ID."""
        pass

    @abstractmethod
    def get_card(self, card_id: int) -> Optional[Card]:
        """Get card by ID."""
        pass

    @abstractmethod
    def get_card_by_number(self, card_number: str) -> Optional[Card]:
        """Get card by card number."""
        pass

    @abstractmethod
    def get_card_by_student(self, student_ref: str) -> Optional[Card]:
        """Get the card owned by a student."""
        pass

    @abstractmethod
    def list_cards(self) -> list[Card]:
        """List all cards."""
        pass

    @abstractmethod
    def set_card_active(self, card_id: int, is_active: bool) -> None:
        """Set the active flag on a card."""
        pass

    # Ledger operations
    @abstractmethod
    def apply_balance_delta(self, card_id: int, delta: int) -> Optional[int]:
        """Add delta to an active card's balance if the result stays non-negative.

        The guard and the update are a single statement, so concurrent
        callers on the same card are serialized by the store.

        Returns:
            New balance, or None if the card is missing, inactive, or the
            balance would go negative (nothing is changed in that case)
        """
        pass

    @abstractmethod
    def append_transaction(
        self,
        card_id: int,
        kind: str,
        amount: int,
        description: Optional[str] = None,
        processed_by: Optional[str] = None,
    ) -> TransactionRecord:
        """Append a transaction log entry."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        card_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionRecord]:
        """List transactions newest first.

        Args:
            card_id: Optional card ID filter
            start: Optional inclusive lower bound on created_at (naive UTC)
            end: Optional exclusive upper bound on created_at (naive UTC)
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def get_transaction_total(self, card_id: int) -> int:
        """Sum of all transaction amounts for a card."""
        pass

    @abstractmethod
    def get_transaction_summary(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[dict[str, Any]]:
        """Aggregate transactions by kind within a window.

        Returns a list of dictionaries with kind, count, total and
        credit_total (sum of positive amounts).
        """
        pass

    @abstractmethod
    def get_card_reconciliations(self, card_id: Optional[int] = None) -> list[dict[str, Any]]:
        """Return card_id, card_number, balance and log_total per card.

        Balance and log total come from one query, so they are read together.
        """
        pass

    @abstractmethod
    def get_ledger_totals(self) -> LedgerTotals:
        """Return card counts and total outstanding balance."""
        pass

    # Recharge request operations
    @abstractmethod
    def create_recharge_request(
        self,
        student_ref: str,
        card_id: int,
        amount: int,
        payment_method: str,
        transaction_ref: Optional[str] = None,
        upi_reference: Optional[str] = None,
        screenshot_ref: Optional[str] = None,
    ) -> int:
        """Create a pending recharge request. Returns request ID."""
        pass

    @abstractmethod
    def get_recharge_request(self, request_id: int) -> Optional[RechargeRequest]:
        """Get recharge request by ID."""
        pass

    @abstractmethod
    def transition_recharge_request(
        self, request_id: int, status: str, processed_by: Optional[str]
    ) -> bool:
        """Move a pending request to a terminal status.

        Returns:
            True if this call performed the transition, False if the request
            is missing or no longer pending
        """
        pass

    @abstractmethod
    def list_recharge_requests(
        self, status: Optional[str] = None, student_ref: Optional[str] = None
    ) -> list[RechargeRequest]:
        """List recharge requests newest first, optionally filtered."""
        pass

    @abstractmethod
    def count_recharge_requests_by_status(self) -> dict[str, int]:
        """Count recharge requests per status."""
        pass

    # Meal operations
    @abstractmethod
    def create_meal(
        self, name: str, price: int, category: str, description: Optional[str] = None
    ) -> int:
        """Create a meal. Returns meal ID."""
        pass

    @abstractmethod
    def get_meal(self, meal_id: int) -> Optional[Meal]:
        """Get meal by ID."""
        pass

    @abstractmethod
    def list_meals(self, available_only: bool = False) -> list[Meal]:
        """List meals, optionally only those currently available."""
        pass

    @abstractmethod
    def update_meal(self, meal_id: int, fields: dict[str, Any]) -> None:
        """Update the given columns of a meal."""
        pass

    @abstractmethod
    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal."""
        pass
