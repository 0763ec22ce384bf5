"""Tests for the recharge request workflow."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from mealcard.domain.entities import PaymentMethod, RequestStatus, TransactionKind
from mealcard.domain.errors import (
    CardInactiveError,
    CardNotFoundError,
    InvalidAmountError,
    RequestNotFoundError,
    RequestNotPendingError,
    ValidationError,
)


def test_submit_creates_pending_request(temp_db, recharge_service, sample_card):
    """Submitting records the request without touching the ledger."""
    request = recharge_service.submit(
        "S1001", 50, payment_method="upi", upi_reference="UPI123", screenshot_ref="uploads/a.png"
    )

    assert request.status == RequestStatus.PENDING
    assert request.is_pending
    assert request.card_id == sample_card.id
    assert request.amount == 50
    assert request.payment_method == PaymentMethod.UPI
    assert request.upi_reference == "UPI123"
    assert request.screenshot_ref == "uploads/a.png"
    assert request.processed_by is None
    assert request.processed_at is None
    assert temp_db.get_card(sample_card.id).balance == 100


def test_submit_defaults_to_upi(recharge_service, sample_card):
    request = recharge_service.submit("S1001", 10)
    assert request.payment_method == PaymentMethod.UPI


@pytest.mark.parametrize("amount", [0, -5])
def test_submit_rejects_non_positive_amount(recharge_service, sample_card, amount):
    with pytest.raises(InvalidAmountError):
        recharge_service.submit("S1001", amount)


def test_submit_rejects_unknown_payment_method(recharge_service, sample_card):
    with pytest.raises(ValidationError, match="Unknown payment method"):
        recharge_service.submit("S1001", 10, payment_method="cheque")


def test_submit_requires_card(recharge_service):
    with pytest.raises(CardNotFoundError):
        recharge_service.submit("nobody", 10)


def test_submit_requires_active_card(recharge_service, card_service, sample_card):
    card_service.deactivate_card(sample_card.card_number)
    with pytest.raises(CardInactiveError):
        recharge_service.submit("S1001", 10)


def test_approve_credits_card(temp_db, recharge_service, sample_card):
    """Balance 100, request 50, approve: balance 150 and one recharge record."""
    request = recharge_service.submit("S1001", 50, payment_method="cash")

    record = recharge_service.approve(request.id, "mgr1")

    assert record.kind == TransactionKind.RECHARGE
    assert record.amount == 50
    assert record.processed_by == "mgr1"
    assert record.description == "Recharge approved by manager - cash payment"
    assert temp_db.get_card(sample_card.id).balance == 150

    approved = recharge_service.get_request(request.id)
    assert approved.status == RequestStatus.APPROVED
    assert approved.processed_by == "mgr1"
    assert approved.processed_at is not None


def test_second_approve_is_rejected(temp_db, recharge_service, sample_card):
    """Approving twice fails and leaves one recharge record."""
    request = recharge_service.submit("S1001", 50)
    recharge_service.approve(request.id, "mgr1")

    with pytest.raises(RequestNotPendingError, match="already approved"):
        recharge_service.approve(request.id, "mgr2")

    assert temp_db.get_card(sample_card.id).balance == 150
    recharges = [
        t for t in temp_db.list_transactions(card_id=sample_card.id) if t.amount == 50
    ]
    assert len(recharges) == 1


def test_reject_leaves_balance(temp_db, recharge_service, sample_card):
    request = recharge_service.submit("S1001", 50)

    rejected = recharge_service.reject(request.id, "mgr1")

    assert rejected.status == RequestStatus.REJECTED
    assert rejected.processed_by == "mgr1"
    assert temp_db.get_card(sample_card.id).balance == 100


def test_terminal_states_are_final(recharge_service, sample_card):
    """No transition leaves approved or rejected."""
    approved = recharge_service.submit("S1001", 10)
    rejected = recharge_service.submit("S1001", 20)
    recharge_service.approve(approved.id, "mgr1")
    recharge_service.reject(rejected.id, "mgr1")

    with pytest.raises(RequestNotPendingError):
        recharge_service.reject(approved.id, "mgr2")
    with pytest.raises(RequestNotPendingError):
        recharge_service.approve(rejected.id, "mgr2")
    with pytest.raises(RequestNotPendingError):
        recharge_service.reject(rejected.id, "mgr2")

    assert recharge_service.get_request(approved.id).processed_by == "mgr1"
    assert recharge_service.get_request(rejected.id).status == RequestStatus.REJECTED


def test_missing_request(recharge_service):
    with pytest.raises(RequestNotFoundError):
        recharge_service.approve(42, "mgr1")
    with pytest.raises(RequestNotFoundError):
        recharge_service.reject(42, "mgr1")


def test_failed_settlement_keeps_request_pending(temp_db, recharge_service, card_service, sample_card):
    """If the card was deactivated after submission, approval rolls back."""
    request = recharge_service.submit("S1001", 50)
    card_service.deactivate_card(sample_card.card_number)

    with pytest.raises(CardInactiveError):
        recharge_service.approve(request.id, "mgr1")

    still_pending = recharge_service.get_request(request.id)
    assert still_pending.status == RequestStatus.PENDING
    assert still_pending.processed_by is None
    assert temp_db.get_card(sample_card.id).balance == 100

    # Once the card is back, the same request can still be approved
    card_service.activate_card(sample_card.card_number)
    recharge_service.approve(request.id, "mgr1")
    assert temp_db.get_card(sample_card.id).balance == 150


def test_concurrent_approvals_settle_once(temp_db, recharge_service, sample_card):
    """Racing approve calls produce one winner and one recharge."""
    request = recharge_service.submit("S1001", 50)
    workers = 6
    barrier = threading.Barrier(workers)

    def approve(actor):
        barrier.wait()
        try:
            recharge_service.approve(request.id, actor)
            return "approved"
        except RequestNotPendingError:
            return "not-pending"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(approve, [f"mgr{i}" for i in range(workers)]))

    assert results.count("approved") == 1
    assert results.count("not-pending") == workers - 1
    assert temp_db.get_card(sample_card.id).balance == 150
    assert len(temp_db.list_transactions(card_id=sample_card.id)) == 2


def test_concurrent_approve_and_reject_have_one_winner(temp_db, recharge_service, sample_card):
    request = recharge_service.submit("S1001", 50)
    barrier = threading.Barrier(2)

    def run(action):
        barrier.wait()
        try:
            action(request.id, "mgr")
            return "won"
        except RequestNotPendingError:
            return "lost"

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(run, [recharge_service.approve, recharge_service.reject]))

    assert sorted(results) == ["lost", "won"]
    final = recharge_service.get_request(request.id)
    expected_balance = 150 if final.status == RequestStatus.APPROVED else 100
    assert temp_db.get_card(sample_card.id).balance == expected_balance


def test_list_requests_filters(recharge_service, card_service, sample_card):
    card_service.issue_card("S1002")
    first = recharge_service.submit("S1001", 10)
    second = recharge_service.submit("S1002", 20)
    recharge_service.approve(first.id, "mgr1")

    assert [r.id for r in recharge_service.list_requests()] == [second.id, first.id]
    assert [r.id for r in recharge_service.list_requests(status="pending")] == [second.id]
    assert [r.id for r in recharge_service.list_requests(status=RequestStatus.APPROVED)] == [first.id]
    assert [r.id for r in recharge_service.list_requests(student_ref="S1002")] == [second.id]


def test_list_requests_unknown_status(recharge_service):
    with pytest.raises(ValidationError, match="Unknown request status"):
        recharge_service.list_requests(status="completed")
