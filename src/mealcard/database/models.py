"""SQLAlchemy models for mealcard database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Boolean,
    CheckConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in every column."""
    return datetime.now(UTC).replace(tzinfo=None)


class Card(Base):
    """Meal card model."""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    card_number = Column(String, unique=True, nullable=False)
    student_ref = Column(String, unique=True, nullable=False)
    balance = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("balance >= 0", name="ck_card_balance_non_negative"),)

    # Relationships
    transactions = relationship("LedgerTransaction", back_populates="card")
    recharge_requests = relationship("RechargeRequest", back_populates="card")


class LedgerTransaction(Base):
    """Append-only transaction log model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False)
    kind = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    processed_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("kind IN ('recharge', 'purchase')", name="ck_transaction_kind"),
        Index("ix_transactions_card_id", "card_id"),
        Index("ix_transactions_created_at", "created_at"),
    )

    # Relationships
    card = relationship("Card", back_populates="transactions")


class RechargeRequest(Base):
    """Recharge request workflow model."""

    __tablename__ = "recharge_requests"

    id = Column(Integer, primary_key=True)
    student_ref = Column(String, nullable=False)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(String, default="pending", nullable=False)
    payment_method = Column(String, default="upi", nullable=False)
    transaction_ref = Column(String, nullable=True)
    upi_reference = Column(String, nullable=True)
    screenshot_ref = Column(String, nullable=True)
    requested_at = Column(DateTime, default=utcnow, nullable=False)
    processed_by = Column(String, nullable=True)
    processed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_recharge_amount_positive"),
        Index("ix_recharge_requests_status", "status"),
    )

    # Relationships
    card = relationship("Card", back_populates="recharge_requests")


class Meal(Base):
    """Meal catalogue model."""

    __tablename__ = "meals"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("price > 0", name="ck_meal_price_positive"),)


def create_session_factory(database_url: str, timeout: float = 30.0) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        timeout: SQLite busy timeout in seconds; ignored for other backends
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"timeout": timeout, "check_same_thread": False}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
