"""Settlement engine: the only writer of card balances and the transaction log."""

import logging
from typing import NoReturn, Optional, TYPE_CHECKING

from mealcard.domain.entities import TransactionKind, TransactionRecord
from mealcard.domain.errors import (
    CardInactiveError,
    CardNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    ValidationError,
    card_inactive,
    card_not_found,
    insufficient_funds,
)

if TYPE_CHECKING:
    from mealcard.database.base import Database

logger = logging.getLogger(__name__)


class SettlementService:
    """Apply balance changes and log them as one atomic unit.

    A settlement never retries on its own. If the store fails, nothing has
    been committed and the caller may resubmit.
    """

    def __init__(self, db: "Database"):
        """Initialize settlement service.

        Args:
            db: Database instance
        """
        self.db = db

    def settle(
        self,
        card_id: int,
        kind: TransactionKind | str,
        amount: int,
        description: Optional[str] = None,
        processed_by: Optional[str] = None,
    ) -> TransactionRecord:
        """Apply a signed delta to a card and append the matching log entry.

        Args:
            card_id: Card ID
            kind: recharge or purchase
            amount: Signed delta; positive for recharge, negative for purchase
            description: Human-readable description for the log
            processed_by: Actor reference of whoever processed the change

        Returns:
            The appended transaction record

        Raises:
            ValidationError: If kind is unknown
            InvalidAmountError: If amount is zero or its sign does not match kind
            CardNotFoundError: If the card does not exist
            CardInactiveError: If the card is deactivated
            InsufficientFundsError: If a debit would drive the balance below zero
            StoreUnavailableError: If the store failed; nothing was applied
        """
        try:
            kind = TransactionKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown transaction kind '{kind}'")

        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError(f"Amount must be an integer, got {amount!r}")
        if amount == 0:
            raise InvalidAmountError("Settlement amount cannot be zero")
        if kind == TransactionKind.RECHARGE and amount < 0:
            raise InvalidAmountError(f"Recharge amount must be positive, got {amount}")
        if kind == TransactionKind.PURCHASE and amount > 0:
            raise InvalidAmountError(f"Purchase amount must be negative, got {amount}")

        with self.db.atomic():
            new_balance = self.db.apply_balance_delta(card_id, amount)
            if new_balance is None:
                self._raise_rejection(card_id, amount)

            record = self.db.append_transaction(
                card_id=card_id,
                kind=kind.value,
                amount=amount,
                description=description,
                processed_by=processed_by,
            )

        logger.info(
            "Settled %s of %d on card %d (balance %d, txn %d)",
            kind.value,
            amount,
            card_id,
            new_balance,
            record.id,
        )
        return record

    def _raise_rejection(self, card_id: int, amount: int) -> NoReturn:
        """Explain why the guarded balance update matched no row."""
        card = self.db.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_not_found(card_id))
        # A credit can only miss the guard on an inactive card, even if the
        # card was reactivated since the update ran
        if not card.is_active or amount > 0:
            raise CardInactiveError(card_inactive(card.card_number))
        logger.warning(
            "Rejected debit of %d on card %s: balance %d", -amount, card.card_number, card.balance
        )
        raise InsufficientFundsError(insufficient_funds(card.card_number, card.balance, -amount))
