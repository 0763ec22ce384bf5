"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as state or balance violations."""


class TransientError(DomainError):
    """Temporary failure; the caller may retry the whole operation."""


class InvalidAmountError(ValidationError):
    """Amount is zero, negative, or has the wrong sign for its kind."""


class CardNotFoundError(NotFoundError):
    """No card matches the given identifier."""


class RequestNotFoundError(NotFoundError):
    """No recharge request matches the given ID."""


class MealNotFoundError(NotFoundError):
    """No meal matches the given ID."""


class InsufficientFundsError(ConflictError):
    """Debit would drive the card balance below zero."""


class CardInactiveError(ConflictError):
    """Card exists but has been deactivated."""


class RequestNotPendingError(ConflictError):
    """Recharge request has already been approved or rejected."""


class MealUnavailableError(ConflictError):
    """Meal exists but is not currently on sale."""


class StoreUnavailableError(TransientError):
    """Store could not be reached or a lock wait timed out."""


def card_not_found(card: int | str) -> str:
    """Return message for missing card by ID or number."""
    return f"Card {card} not found"


def student_card_not_found(student_ref: str) -> str:
    """Return message for a student without a card."""
    return f"No card found for student '{student_ref}'"


def card_inactive(card_number: str) -> str:
    """Return message for a deactivated card."""
    return f"Card {card_number} is inactive"


def insufficient_funds(card_number: str, balance: int, amount: int) -> str:
    """Return message for a debit larger than the balance."""
    return f"Insufficient balance on card {card_number}: balance {balance}, required {amount}"


def request_not_found(request_id: int) -> str:
    """Return message for missing recharge request."""
    return f"Recharge request {request_id} not found"


def request_not_pending(request_id: int, status: str) -> str:
    """Return message for a request that was already processed."""
    return f"Recharge request {request_id} is already {status}"


def meal_not_found(meal_id: int) -> str:
    """Return message for missing meal."""
    return f"Meal {meal_id} not found"


def meal_unavailable(name: str) -> str:
    """Return message for a meal that is not on sale."""
    return f"Meal '{name}' is not available"


def invalid_amount(amount: int) -> str:
    """Return message for a non-positive amount."""
    return f"Invalid amount: {amount}. Amount must be greater than zero"


def store_unavailable(reason: str) -> str:
    """Return message for a transient store failure."""
    return f"Store unavailable, please retry: {reason}"
