"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the string columns used for
kinds and statuses are turned into enums in exactly one place.
"""

from mealcard.domain import entities as domain
from mealcard.database.models import (
    Card as ORMCard,
    LedgerTransaction as ORMTransaction,
    RechargeRequest as ORMRechargeRequest,
    Meal as ORMMeal,
)


def card_to_domain(orm_card: ORMCard) -> domain.Card:
    """Convert SQLAlchemy Card model to domain Card entity."""
    return domain.Card(
        id=orm_card.id,
        card_number=orm_card.card_number,
        student_ref=orm_card.student_ref,
        balance=orm_card.balance,
        is_active=orm_card.is_active,
        created_at=orm_card.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.TransactionRecord:
    """Convert SQLAlchemy LedgerTransaction model to domain TransactionRecord."""
    return domain.TransactionRecord(
        id=orm_transaction.id,
        card_id=orm_transaction.card_id,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        processed_by=orm_transaction.processed_by,
        created_at=orm_transaction.created_at,
    )


def recharge_request_to_domain(orm_request: ORMRechargeRequest) -> domain.RechargeRequest:
    """Convert SQLAlchemy RechargeRequest model to domain RechargeRequest entity."""
    return domain.RechargeRequest(
        id=orm_request.id,
        student_ref=orm_request.student_ref,
        card_id=orm_request.card_id,
        amount=orm_request.amount,
        status=domain.RequestStatus(orm_request.status),
        payment_method=domain.PaymentMethod(orm_request.payment_method),
        transaction_ref=orm_request.transaction_ref,
        upi_reference=orm_request.upi_reference,
        screenshot_ref=orm_request.screenshot_ref,
        requested_at=orm_request.requested_at,
        processed_by=orm_request.processed_by,
        processed_at=orm_request.processed_at,
    )


def meal_to_domain(orm_meal: ORMMeal) -> domain.Meal:
    """Convert SQLAlchemy Meal model to domain Meal entity."""
    return domain.Meal(
        id=orm_meal.id,
        name=orm_meal.name,
        price=orm_meal.price,
        category=orm_meal.category,
        description=orm_meal.description,
        is_available=orm_meal.is_available,
        created_at=orm_meal.created_at,
    )
