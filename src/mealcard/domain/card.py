"""Card issuance and lookup domain service."""

import logging
import secrets
import time
from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

from mealcard.domain.entities import (
    BulkIssueResult,
    Card as CardEntity,
    TransactionKind,
    TransactionRecord,
)
from mealcard.domain.errors import (
    CardNotFoundError,
    ConflictError,
    InvalidAmountError,
    ValidationError,
    card_not_found,
    student_card_not_found,
)
from mealcard.domain.settlement import SettlementService
from mealcard.utils.amount_parser import parse_amount

if TYPE_CHECKING:
    from mealcard.database.base import Database

logger = logging.getLogger(__name__)

OPENING_BALANCE_DESCRIPTION = "Opening balance"


def generate_card_number() -> str:
    """Return a new card number such as CARD1718000000000-3f9a1c."""
    return f"CARD{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def _row_balance(value: Any) -> Optional[int]:
    """Normalize a batch row's starting balance; blank means the default grant."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return parse_amount(value)
        except ValueError as e:
            raise InvalidAmountError(str(e)) from e
    return value


class CardService:
    """Service for issuing and looking up meal cards."""

    def __init__(self, db: "Database", starting_balance: int = 0):
        """Initialize card service.

        Args:
            db: Database instance
            starting_balance: Grant credited to every newly issued card
        """
        self.db = db
        self.starting_balance = starting_balance
        self.settlement = SettlementService(db)

    def issue_card(
        self,
        student_ref: str,
        card_number: Optional[str] = None,
        starting_balance: Optional[int] = None,
    ) -> CardEntity:
        """Issue a card to a student.

        The opening grant is written as a recharge so the card's log always
        sums to its balance.

        Args:
            student_ref: Opaque student identity from the identity provider
            card_number: Optional card number; generated when omitted
            starting_balance: Optional grant overriding the service default

        Returns:
            The issued card

        Raises:
            ValidationError: If student_ref or card_number is blank
            InvalidAmountError: If the starting balance is negative
            ConflictError: If the student or card number already has a card
        """
        student_ref = (student_ref or "").strip()
        if not student_ref:
            raise ValidationError("Student reference cannot be empty")

        if card_number is None:
            card_number = generate_card_number()
        card_number = card_number.strip()
        if not card_number:
            raise ValidationError("Card number cannot be empty")

        grant = self.starting_balance if starting_balance is None else starting_balance
        if grant < 0:
            raise InvalidAmountError(f"Starting balance cannot be negative, got {grant}")

        if self.db.get_card_by_student(student_ref) is not None:
            raise ConflictError(f"Student '{student_ref}' already has a card")
        if self.db.get_card_by_number(card_number) is not None:
            raise ConflictError(f"Card number '{card_number}' is already in use")

        with self.db.atomic():
            card_id = self.db.create_card(card_number=card_number, student_ref=student_ref)
            if grant > 0:
                self.settlement.settle(
                    card_id=card_id,
                    kind=TransactionKind.RECHARGE,
                    amount=grant,
                    description=OPENING_BALANCE_DESCRIPTION,
                )
            card = self.db.get_card(card_id)

        logger.info("Issued card %s to student %s with balance %d", card_number, student_ref, grant)
        return card

    def issue_cards(
        self, rows: Iterable[Mapping[str, Any]], first_row: int = 1
    ) -> BulkIssueResult:
        """Issue cards for a batch of students.

        Each row is issued in its own unit of work, so a duplicate or invalid
        row is reported and the rest of the batch still goes through.

        Args:
            rows: Mappings with ``student_ref`` and optional ``card_number``
                and ``starting_balance`` (int, or a string such as "₹100")
            first_row: Number reported for the first row in error messages

        Returns:
            Issued cards and one "Row N: message" line per rejected row

        Raises:
            StoreUnavailableError: If the store fails; rows before the
                failing one stay issued
        """
        issued = []
        errors = []

        for row_num, row in enumerate(rows, start=first_row):
            try:
                card = self.issue_card(
                    student_ref=row.get("student_ref") or "",
                    card_number=row.get("card_number") or None,
                    starting_balance=_row_balance(row.get("starting_balance")),
                )
            except (ConflictError, ValidationError) as e:
                errors.append(f"Row {row_num}: {e}")
                continue
            issued.append(card)

        if errors:
            logger.warning("Bulk issue rejected %d of %d rows", len(errors), len(issued) + len(errors))
        return BulkIssueResult(issued=issued, errors=errors)

    def get_card(self, card_id: int) -> Optional[CardEntity]:
        """Get card by ID.

        Args:
            card_id: Card ID

        Returns:
            Card entity or None if not found
        """
        return self.db.get_card(card_id)

    def get_card_by_number(self, card_number: str) -> Optional[CardEntity]:
        """Get card by card number."""
        return self.db.get_card_by_number(card_number)

    def get_card_for_student(self, student_ref: str) -> Optional[CardEntity]:
        """Get the card owned by a student."""
        return self.db.get_card_by_student(student_ref)

    def require_card_by_number(self, card_number: str) -> CardEntity:
        """Get card by number or raise CardNotFoundError."""
        card = self.db.get_card_by_number(card_number)
        if card is None:
            raise CardNotFoundError(card_not_found(card_number))
        return card

    def require_card_for_student(self, student_ref: str) -> CardEntity:
        """Get a student's card or raise CardNotFoundError."""
        card = self.db.get_card_by_student(student_ref)
        if card is None:
            raise CardNotFoundError(student_card_not_found(student_ref))
        return card

    def list_cards(self) -> list[CardEntity]:
        """List all cards."""
        return self.db.list_cards()

    def deactivate_card(self, card_number: str) -> CardEntity:
        """Deactivate a card. Cards are never deleted."""
        return self._set_active(card_number, False)

    def activate_card(self, card_number: str) -> CardEntity:
        """Reactivate a previously deactivated card."""
        return self._set_active(card_number, True)

    def _set_active(self, card_number: str, is_active: bool) -> CardEntity:
        card = self.require_card_by_number(card_number)
        with self.db.atomic():
            self.db.set_card_active(card.id, is_active)
            card = self.db.get_card(card.id)
        logger.info("Card %s %s", card_number, "activated" if is_active else "deactivated")
        return card

    def list_transactions(self, card_id: int, limit: Optional[int] = None) -> list[TransactionRecord]:
        """List a card's transactions, newest first.

        Raises:
            CardNotFoundError: If the card does not exist
        """
        if self.db.get_card(card_id) is None:
            raise CardNotFoundError(card_not_found(card_id))
        return self.db.list_transactions(card_id=card_id, limit=limit)

    def list_recent_transactions(self, limit: int = 100) -> list[TransactionRecord]:
        """List the most recent transactions across all cards."""
        return self.db.list_transactions(limit=limit)
