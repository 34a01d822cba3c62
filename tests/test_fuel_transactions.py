from datetime import timedelta
from decimal import Decimal

import pytest

from core.exceptions import (
    AccessError,
    ConflictError,
    ExpiredError,
    InsufficientBalanceError,
    ValidationError,
)
from fuel.models import FuelCard, FuelTransaction, FuelTransactionStatus
from fuel.services import review, transactions

from .conftest import MUMBAI, NOW


@pytest.fixture
def issued(driver_act, card):
    return transactions.generate_qr(
        driver_act,
        vehicle_number="mh12ab1234",
        amount="500",
        latitude=MUMBAI[0],
        longitude=MUMBAI[1],
        now=NOW,
    )


@pytest.fixture
def confirmed(issued, driver_act):
    transactions.confirm_transaction(issued.transaction, driver_act, now=NOW + timedelta(minutes=1))
    return issued


def _submit(staff_act, qr_code, *, amount="500", location=MUMBAI, at=NOW + timedelta(minutes=5), **kwargs):
    return transactions.submit_transaction(
        staff_act,
        qr_code=qr_code,
        amount=amount,
        latitude=location[0],
        longitude=location[1],
        now=at,
        **kwargs,
    )


@pytest.fixture
def completed(confirmed, staff_act):
    return _submit(staff_act, confirmed.qr_code)


def test_generate_issues_pending_without_debit(issued, card):
    tx = issued.transaction
    assert tx.status == FuelTransactionStatus.PENDING
    assert tx.vehicle_number == "MH12AB1234"
    assert tx.amount == tx.requested_amount == Decimal("500.00")
    assert tx.qr_code == issued.qr_code
    assert tx.qr_code_expiry == NOW + timedelta(hours=1)
    assert issued.qr_image.startswith("data:image/png;base64,")

    card.refresh_from_db()
    assert card.balance == Decimal("1000.00")


def test_generate_rejects_amount_over_balance(driver_act, card):
    with pytest.raises(InsufficientBalanceError) as exc:
        transactions.generate_qr(
            driver_act, vehicle_number="MH12AB1234", amount="5000", latitude=MUMBAI[0], longitude=MUMBAI[1], now=NOW
        )
    assert exc.value.detail == {"balance": "1000.00", "required": "5000.00"}
    assert not FuelTransaction.objects.exists()


@pytest.mark.parametrize("amount", [None, "0", "-10", "abc"])
def test_generate_rejects_bad_amount(driver_act, card, amount):
    with pytest.raises(ValidationError):
        transactions.generate_qr(
            driver_act, vehicle_number="MH12AB1234", amount=amount, latitude=MUMBAI[0], longitude=MUMBAI[1], now=NOW
        )


def test_generate_requires_gps(driver_act, card):
    with pytest.raises(ValidationError):
        transactions.generate_qr(driver_act, vehicle_number="MH12AB1234", amount="100", latitude=None, longitude=72.8, now=NOW)
    with pytest.raises(ValidationError):
        transactions.generate_qr(driver_act, vehicle_number="MH12AB1234", amount="100", latitude=91, longitude=72.8, now=NOW)


def test_validate_qr_only_while_pending(issued, driver_act, staff_act):
    assert transactions.validate_qr(staff_act, qr_code=issued.qr_code, now=NOW).pk == issued.transaction.pk

    with pytest.raises(AccessError):
        transactions.validate_qr(driver_act, qr_code=issued.qr_code, now=NOW)

    transactions.confirm_transaction(issued.transaction, driver_act, now=NOW)
    with pytest.raises(ConflictError):
        transactions.validate_qr(staff_act, qr_code=issued.qr_code, now=NOW)


def test_confirm_can_change_amount(issued, driver_act):
    tx = transactions.confirm_transaction(issued.transaction, driver_act, amount="800", now=NOW)
    assert tx.status == FuelTransactionStatus.CONFIRMED
    assert tx.amount == Decimal("800.00")
    assert tx.requested_amount == Decimal("500.00")


def test_confirm_checks_new_amount_and_owner(issued, driver_act, other_driver_act):
    with pytest.raises(InsufficientBalanceError):
        transactions.confirm_transaction(issued.transaction, driver_act, amount="1500", now=NOW)
    with pytest.raises(AccessError):
        transactions.confirm_transaction(issued.transaction, other_driver_act, now=NOW)


def test_confirm_after_expiry(issued, driver_act):
    with pytest.raises(ExpiredError):
        transactions.confirm_transaction(issued.transaction, driver_act, now=NOW + timedelta(hours=2))


def test_full_flow_debits_once(completed, card, pump_owner, staff_act, confirmed):
    assert completed.status == FuelTransactionStatus.COMPLETED
    assert completed.pump_owner_id == pump_owner.pk
    assert completed.completed_at == NOW + timedelta(minutes=5)
    assert not completed.has_fraud_flags

    card.refresh_from_db()
    assert card.balance == Decimal("500.00")
    assert card.last_used_at == NOW + timedelta(minutes=5)

    with pytest.raises(ConflictError):
        _submit(staff_act, confirmed.qr_code)
    card.refresh_from_db()
    assert card.balance == Decimal("500.00")


def test_submit_requires_confirmation(issued, staff_act):
    with pytest.raises(ConflictError) as exc:
        _submit(staff_act, issued.qr_code)
    assert "must be confirmed" in exc.value.message


def test_submit_for_another_pump(confirmed, staff_act, other_pump_owner):
    with pytest.raises(AccessError):
        _submit(staff_act, confirmed.qr_code, pump_owner_id=other_pump_owner.pk)


def test_submit_when_balance_dropped(confirmed, staff_act, card):
    FuelCard.objects.filter(pk=card.pk).update(balance=Decimal("100.00"))

    with pytest.raises(InsufficientBalanceError):
        _submit(staff_act, confirmed.qr_code)

    tx = FuelTransaction.objects.get(pk=confirmed.transaction.pk)
    assert tx.status == FuelTransactionStatus.CONFIRMED
    card.refresh_from_db()
    assert card.balance == Decimal("100.00")


def test_submit_with_stale_qr(confirmed, staff_act):
    with pytest.raises(ExpiredError):
        _submit(staff_act, confirmed.qr_code, at=NOW + timedelta(hours=2))


def _expire_stored(tx):
    FuelTransaction.objects.filter(pk=tx.pk).update(qr_code_expiry=NOW - timedelta(seconds=1))


def test_confirm_honours_stored_expiry(issued, driver_act):
    _expire_stored(issued.transaction)
    with pytest.raises(ExpiredError):
        transactions.confirm_transaction(issued.transaction, driver_act, now=NOW)
    assert FuelTransaction.objects.get(pk=issued.transaction.pk).status == FuelTransactionStatus.PENDING


def test_confirm_honours_token_age(issued, driver_act):
    FuelTransaction.objects.filter(pk=issued.transaction.pk).update(qr_code_expiry=NOW + timedelta(days=1))
    with pytest.raises(ExpiredError):
        transactions.confirm_transaction(issued.transaction, driver_act, now=NOW + timedelta(hours=2))


def test_validate_honours_stored_expiry(issued, staff_act):
    _expire_stored(issued.transaction)
    with pytest.raises(ExpiredError):
        transactions.validate_qr(staff_act, qr_code=issued.qr_code, now=NOW)


def test_submit_honours_stored_expiry(confirmed, staff_act, card):
    _expire_stored(confirmed.transaction)
    with pytest.raises(ExpiredError):
        _submit(staff_act, confirmed.qr_code, at=NOW)

    assert FuelTransaction.objects.get(pk=confirmed.transaction.pk).status == FuelTransactionStatus.CONFIRMED
    card.refresh_from_db()
    assert card.balance == Decimal("1000.00")


def test_submit_far_from_pump_is_flagged_but_debited(confirmed, staff_act, card):
    tx = _submit(staff_act, confirmed.qr_code, location=(19.2, 72.9))

    assert tx.status == FuelTransactionStatus.FLAGGED
    assert tx.gps_mismatch
    assert 13.5 <= tx.gps_mismatch_distance <= 15.5
    assert tx.flagged_at == NOW + timedelta(minutes=5)
    card.refresh_from_db()
    assert card.balance == Decimal("500.00")


def test_cancel_rules(issued, driver_act, other_driver_act):
    with pytest.raises(AccessError):
        transactions.cancel_transaction(issued.transaction, other_driver_act)

    tx = transactions.cancel_transaction(issued.transaction, driver_act, reason="changed pump", now=NOW)
    assert tx.status == FuelTransactionStatus.CANCELLED
    assert tx.cancel_reason == "changed pump"
    assert tx.cancelled_by_id == driver_act.id

    with pytest.raises(ConflictError) as exc:
        transactions.cancel_transaction(tx, driver_act)
    assert exc.value.message == "Transaction is already cancelled"


def test_completed_cannot_be_cancelled(completed, driver_act):
    with pytest.raises(ConflictError) as exc:
        transactions.cancel_transaction(completed, driver_act)
    assert exc.value.message == "Cannot cancel completed transaction"


def test_receipt_only_for_completed(issued, driver_act):
    with pytest.raises(ConflictError):
        transactions.upload_receipt(issued.transaction, driver_act, photo="receipts/x.jpg", now=NOW)


def test_reused_receipt_is_flagged(completed, driver_act, history_tx):
    history_tx(300, receipt_photo="receipts/x.jpg")

    tx = transactions.upload_receipt(completed, driver_act, photo="receipts/x.jpg", now=NOW + timedelta(minutes=6))
    assert tx.receipt_uploaded_at == NOW + timedelta(minutes=6)
    assert tx.duplicate_receipt
    assert tx.status == FuelTransactionStatus.FLAGGED


def test_clean_receipt_keeps_completed(completed, driver_act):
    tx = transactions.upload_receipt(completed, driver_act, photo="receipts/fresh.jpg", now=NOW + timedelta(minutes=6))
    assert tx.status == FuelTransactionStatus.COMPLETED
    assert tx.receipt_photo == "receipts/fresh.jpg"


def test_admin_flag_and_resolve(completed, admin, driver_act):
    with pytest.raises(AccessError):
        review.flag_transaction(completed, driver_act, reason="looks off")

    tx = review.flag_transaction(completed, admin, fraud_type="unusual_pattern", reason="looks off", now=NOW)
    assert tx.status == FuelTransactionStatus.FLAGGED
    assert tx.unusual_pattern and not tx.gps_mismatch
    assert tx.flagged_by_id == admin.user_id

    tx = review.resolve_fraud_alert(tx, admin, is_fraud=False, notes="regular customer", now=NOW)
    assert tx.status == FuelTransactionStatus.COMPLETED
    assert not tx.has_fraud_flags
    assert tx.fraud_resolved
    assert tx.notes == "looks off\nResolution: regular customer"

    with pytest.raises(ConflictError):
        review.resolve_fraud_alert(tx, admin, is_fraud=True)


def test_flag_without_type_sets_every_flag(completed, admin):
    tx = review.flag_transaction(completed, admin, now=NOW)
    assert all(getattr(tx, field) for field in FuelTransaction.FLAG_FIELDS)

    tx = review.resolve_fraud_alert(tx, admin, is_fraud=True, now=NOW)
    assert tx.status == FuelTransactionStatus.FLAGGED
    assert tx.fraud_resolved


def test_pending_cannot_be_flagged(issued, admin):
    with pytest.raises(ConflictError):
        review.flag_transaction(issued.transaction, admin, fraud_type="gps_mismatch")
    with pytest.raises(ValidationError):
        review.flag_transaction(issued.transaction, admin, fraud_type="bogus")
