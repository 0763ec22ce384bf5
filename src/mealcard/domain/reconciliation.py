"""Ledger reconciliation: card balances against the transaction log."""

import logging
from typing import TYPE_CHECKING

from mealcard.domain.entities import LedgerTotals, Reconciliation
from mealcard.domain.errors import CardNotFoundError, card_not_found

if TYPE_CHECKING:
    from mealcard.database.base import Database

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Check that every card's balance equals the sum of its log entries."""

    def __init__(self, db: "Database"):
        self.db = db

    def verify_card(self, card_id: int) -> Reconciliation:
        """Compare one card's balance with its log total."""
        rows = self.db.get_card_reconciliations(card_id=card_id)
        if not rows:
            raise CardNotFoundError(card_not_found(card_id))
        return Reconciliation(**rows[0])

    def verify_all(self) -> list[Reconciliation]:
        """Return only the cards whose balance disagrees with the log."""
        mismatches = []
        for row in self.db.get_card_reconciliations():
            result = Reconciliation(**row)
            if not result.is_consistent:
                logger.error(
                    "Card %s balance %d does not match log total %d",
                    result.card_number,
                    result.balance,
                    result.log_total,
                )
                mismatches.append(result)
        return mismatches

    def totals(self) -> LedgerTotals:
        """Return card counts and total outstanding balance."""
        return self.db.get_ledger_totals()
