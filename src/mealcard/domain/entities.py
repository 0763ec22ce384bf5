"""Domain model entities for mealcard.

These are pure data classes representing business concepts, independent of
database schema. Rows read from the store are converted into these frozen
objects so that callers never hold a live ORM instance across a unit of work.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    """Kinds of balance-changing events."""

    RECHARGE = "recharge"
    PURCHASE = "purchase"


class RequestStatus(str, Enum):
    """Recharge request lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    """How the student says they paid for a recharge."""

    ONLINE = "online"
    CASH = "cash"
    UPI = "upi"


@dataclass(frozen=True)
class Card:
    """Meal card domain entity."""

    id: int
    card_number: str
    student_ref: str
    balance: int
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable ledger entry for one settlement."""

    id: int
    card_id: int
    kind: TransactionKind
    amount: int
    description: Optional[str]
    processed_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class RechargeRequest:
    """Student top-up request domain entity."""

    id: int
    student_ref: str
    card_id: int
    amount: int
    status: RequestStatus
    payment_method: PaymentMethod
    transaction_ref: Optional[str]
    upi_reference: Optional[str]
    screenshot_ref: Optional[str]
    requested_at: datetime
    processed_by: Optional[str]
    processed_at: Optional[datetime]

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING


@dataclass(frozen=True)
class Meal:
    """Priced catalogue item domain entity."""

    id: int
    name: str
    price: int
    category: str
    description: Optional[str]
    is_available: bool
    created_at: datetime


@dataclass(frozen=True)
class PurchaseReceipt:
    """Result of a successful cashier purchase."""

    card_number: str
    student_ref: str
    meal_name: str
    new_balance: int
    transaction: TransactionRecord


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Counters for a time window, derived from the log and requests.

    ``start`` and ``end`` are naive UTC instants bounding ``[start, end)``.
    """

    start: datetime
    end: datetime
    total_recharges: int
    total_purchases: int
    total_revenue: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int


@dataclass(frozen=True)
class Reconciliation:
    """Comparison of a card balance against its transaction log."""

    card_id: int
    card_number: str
    balance: int
    log_total: int

    @property
    def is_consistent(self) -> bool:
        return self.balance == self.log_total


@dataclass(frozen=True)
class LedgerTotals:
    """Outstanding totals across all cards."""

    card_count: int
    active_card_count: int
    total_balance: int


@dataclass(frozen=True)
class BulkIssueResult:
    """Outcome of issuing cards for many students in one batch.

    ``errors`` holds one "Row N: message" line per rejected row.
    """

    issued: list[Card]
    errors: list[str]
