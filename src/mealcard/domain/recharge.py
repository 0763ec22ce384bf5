"""Recharge request workflow domain service."""

import logging
from typing import Optional, TYPE_CHECKING

from mealcard.domain.entities import (
    PaymentMethod,
    RechargeRequest as RechargeRequestEntity,
    RequestStatus,
    TransactionKind,
    TransactionRecord,
)
from mealcard.domain.errors import (
    CardInactiveError,
    CardNotFoundError,
    InvalidAmountError,
    RequestNotFoundError,
    RequestNotPendingError,
    ValidationError,
    card_inactive,
    invalid_amount,
    request_not_found,
    request_not_pending,
    student_card_not_found,
)
from mealcard.domain.settlement import SettlementService

if TYPE_CHECKING:
    from mealcard.database.base import Database

logger = logging.getLogger(__name__)


def recharge_description(payment_method: PaymentMethod) -> str:
    """Return the log description for an approved recharge."""
    return f"Recharge approved by manager - {payment_method.value} payment"


class RechargeService:
    """Service for the pending → approved | rejected request lifecycle.

    Transitions are conditional updates on ``status = 'pending'``, so of
    several concurrent approve/reject calls on one request exactly one wins.
    """

    def __init__(self, db: "Database"):
        """Initialize recharge service.

        Args:
            db: Database instance
        """
        self.db = db
        self.settlement = SettlementService(db)

    def submit(
        self,
        student_ref: str,
        amount: int,
        payment_method: PaymentMethod | str = PaymentMethod.UPI,
        transaction_ref: Optional[str] = None,
        upi_reference: Optional[str] = None,
        screenshot_ref: Optional[str] = None,
    ) -> RechargeRequestEntity:
        """Submit a recharge request for a student's card.

        Payment references are stored for audit only and are never checked
        against a payment provider.

        Args:
            student_ref: Requesting student
            amount: Requested amount, must be positive
            payment_method: online, cash or upi
            transaction_ref: Optional gateway transaction ID
            upi_reference: Optional UPI reference
            screenshot_ref: Optional proof-of-payment artifact reference

        Returns:
            The pending request

        Raises:
            InvalidAmountError: If amount is not positive
            ValidationError: If payment_method is unknown
            CardNotFoundError: If the student has no card
            CardInactiveError: If the student's card is deactivated
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError(invalid_amount(amount))

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            allowed = ", ".join(m.value for m in PaymentMethod)
            raise ValidationError(f"Unknown payment method '{payment_method}'. Expected one of: {allowed}")

        card = self.db.get_card_by_student(student_ref)
        if card is None:
            raise CardNotFoundError(student_card_not_found(student_ref))
        if not card.is_active:
            raise CardInactiveError(card_inactive(card.card_number))

        with self.db.atomic():
            request_id = self.db.create_recharge_request(
                student_ref=student_ref,
                card_id=card.id,
                amount=amount,
                payment_method=method.value,
                transaction_ref=transaction_ref,
                upi_reference=upi_reference,
                screenshot_ref=screenshot_ref,
            )
            request = self.db.get_recharge_request(request_id)

        logger.info(
            "Recharge request %d submitted by %s for %d via %s",
            request_id,
            student_ref,
            amount,
            method.value,
        )
        return request

    def approve(self, request_id: int, actor_ref: str) -> TransactionRecord:
        """Approve a pending request and credit the card.

        The status transition and the settlement commit together. If the
        settlement fails the request stays pending.

        Args:
            request_id: Recharge request ID
            actor_ref: Approving manager or admin

        Returns:
            The recharge transaction record

        Raises:
            RequestNotFoundError: If the request does not exist
            RequestNotPendingError: If the request was already processed
            CardNotFoundError, CardInactiveError: From settlement
        """
        with self.db.atomic():
            self._transition(request_id, RequestStatus.APPROVED, actor_ref)
            request = self.db.get_recharge_request(request_id)
            record = self.settlement.settle(
                card_id=request.card_id,
                kind=TransactionKind.RECHARGE,
                amount=request.amount,
                description=recharge_description(request.payment_method),
                processed_by=actor_ref,
            )

        logger.info("Recharge request %d approved by %s", request_id, actor_ref)
        return record

    def reject(self, request_id: int, actor_ref: str) -> RechargeRequestEntity:
        """Reject a pending request. The ledger is not touched.

        Raises:
            RequestNotFoundError: If the request does not exist
            RequestNotPendingError: If the request was already processed
        """
        with self.db.atomic():
            self._transition(request_id, RequestStatus.REJECTED, actor_ref)
            request = self.db.get_recharge_request(request_id)

        logger.info("Recharge request %d rejected by %s", request_id, actor_ref)
        return request

    def _transition(self, request_id: int, status: RequestStatus, actor_ref: str) -> None:
        if self.db.transition_recharge_request(request_id, status.value, actor_ref):
            return

        current = self.db.get_recharge_request(request_id)
        if current is None:
            raise RequestNotFoundError(request_not_found(request_id))
        logger.warning(
            "Cannot mark recharge request %d %s: already %s",
            request_id,
            status.value,
            current.status.value,
        )
        raise RequestNotPendingError(request_not_pending(request_id, current.status.value))

    def get_request(self, request_id: int) -> Optional[RechargeRequestEntity]:
        """Get recharge request by ID.

        Args:
            request_id: Recharge request ID

        Returns:
            Request entity or None if not found
        """
        return self.db.get_recharge_request(request_id)

    def list_requests(
        self,
        status: Optional[RequestStatus | str] = None,
        student_ref: Optional[str] = None,
    ) -> list[RechargeRequestEntity]:
        """List requests newest first.

        Raises:
            ValidationError: If status is not a known request status
        """
        status_value = None
        if status is not None:
            try:
                status_value = RequestStatus(status).value
            except ValueError:
                allowed = ", ".join(s.value for s in RequestStatus)
                raise ValidationError(f"Unknown request status '{status}'. Expected one of: {allowed}")
        return self.db.list_recharge_requests(status=status_value, student_ref=student_ref)
