"""Tests for card issuance and lookup."""

import pytest

from mealcard.domain.card import CardService, OPENING_BALANCE_DESCRIPTION, generate_card_number
from mealcard.domain.entities import TransactionKind
from mealcard.domain.errors import (
    CardNotFoundError,
    ConflictError,
    InvalidAmountError,
    ValidationError,
)


def test_issue_card_defaults_to_zero_balance(temp_db, card_service):
    card = card_service.issue_card("S1001")

    assert card.balance == 0
    assert card.is_active
    assert card.student_ref == "S1001"
    assert card.card_number.startswith("CARD")
    assert temp_db.list_transactions(card_id=card.id) == []


def test_issue_card_with_starting_grant_logs_recharge(temp_db, card_service):
    """The opening grant is a logged recharge so the invariant holds."""
    card = card_service.issue_card("S1001", card_number="CARD-1", starting_balance=100)

    assert card.balance == 100
    [record] = temp_db.list_transactions(card_id=card.id)
    assert record.kind == TransactionKind.RECHARGE
    assert record.amount == 100
    assert record.description == OPENING_BALANCE_DESCRIPTION


def test_service_default_grant(temp_db):
    service = CardService(temp_db, starting_balance=75)
    assert service.issue_card("S1001").balance == 75
    assert service.issue_card("S1002", starting_balance=0).balance == 0


def test_issue_card_negative_grant(card_service):
    with pytest.raises(InvalidAmountError):
        card_service.issue_card("S1001", starting_balance=-1)


def test_issue_card_blank_student(card_service):
    with pytest.raises(ValidationError):
        card_service.issue_card("   ")


def test_one_card_per_student(card_service, sample_card):
    with pytest.raises(ConflictError, match="already has a card"):
        card_service.issue_card("S1001")


def test_card_number_unique(card_service, sample_card):
    with pytest.raises(ConflictError, match="already in use"):
        card_service.issue_card("S9999", card_number=sample_card.card_number)


def test_generated_card_numbers_differ():
    assert generate_card_number() != generate_card_number()


def test_lookups(card_service, sample_card):
    assert card_service.get_card(sample_card.id) == sample_card
    assert card_service.get_card_by_number("CARD-1001") == sample_card
    assert card_service.get_card_for_student("S1001") == sample_card
    assert card_service.get_card_by_number("CARD-NOPE") is None
    assert card_service.get_card_for_student("nobody") is None


def test_require_card_raises(card_service):
    with pytest.raises(CardNotFoundError):
        card_service.require_card_by_number("CARD-NOPE")
    with pytest.raises(CardNotFoundError):
        card_service.require_card_for_student("nobody")


def test_deactivate_and_activate(card_service, sample_card):
    """Cards are toggled, never deleted."""
    inactive = card_service.deactivate_card(sample_card.card_number)
    assert not inactive.is_active
    assert inactive.balance == 100

    active = card_service.activate_card(sample_card.card_number)
    assert active.is_active
    assert [c.id for c in card_service.list_cards()] == [sample_card.id]


def test_deactivate_missing_card(card_service):
    with pytest.raises(CardNotFoundError):
        card_service.deactivate_card("CARD-NOPE")


def test_transaction_history_newest_first(card_service, settlement_service, sample_card):
    settlement_service.settle(sample_card.id, "purchase", -20, description="Tea")
    settlement_service.settle(sample_card.id, "recharge", 40, description="Top up")

    history = card_service.list_transactions(sample_card.id)
    assert [t.amount for t in history] == [40, -20, 100]
    assert [t.amount for t in card_service.list_transactions(sample_card.id, limit=1)] == [40]


def test_transaction_history_missing_card(card_service):
    with pytest.raises(CardNotFoundError):
        card_service.list_transactions(999)


def test_recent_transactions_across_cards(card_service, sample_card):
    other = card_service.issue_card("S1002", starting_balance=30)

    recent = card_service.list_recent_transactions(limit=100)
    assert {t.card_id for t in recent} == {sample_card.id, other.id}
    assert len(card_service.list_recent_transactions(limit=1)) == 1


def test_issue_cards_mixed_batch(temp_db, card_service, sample_card):
    """Bad rows are reported and the rest of the batch is issued."""
    result = card_service.issue_cards(
        [
            {"student_ref": "S2001"},
            {"student_ref": "S1001"},
            {"student_ref": "  "},
            {"student_ref": "S2002", "starting_balance": -5},
            {"student_ref": "S2003", "card_number": "CARD-2003", "starting_balance": "₹40"},
        ]
    )

    assert [c.student_ref for c in result.issued] == ["S2001", "S2003"]
    assert result.issued[1].balance == 40
    assert len(result.errors) == 3
    assert result.errors[0].startswith("Row 2:")
    assert "already has a card" in result.errors[0]
    assert result.errors[1].startswith("Row 3:")
    assert result.errors[2].startswith("Row 4:")

    # Rejected rows leave nothing behind
    assert card_service.get_card_for_student("S2002") is None
    assert len(card_service.list_cards()) == 3
    assert temp_db.get_transaction_total(result.issued[1].id) == 40


def test_issue_cards_duplicate_within_batch(card_service):
    result = card_service.issue_cards(
        [{"student_ref": "S1"}, {"student_ref": "S1"}], first_row=2
    )

    assert len(result.issued) == 1
    assert result.errors == ["Row 3: Student 'S1' already has a card"]


def test_issue_cards_bad_balance_text(card_service):
    result = card_service.issue_cards([{"student_ref": "S1", "starting_balance": "lots"}])

    assert result.issued == []
    assert result.errors[0].startswith("Row 1: Could not parse amount")
