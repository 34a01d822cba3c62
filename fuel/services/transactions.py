# fuel/services/transactions.py
import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.codes import unique_code
from core.conf import fleet_setting
from core.exceptions import (
    AccessError,
    ConflictError,
    ExpiredError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from core.geo import validate_coordinates
from fuel.models import FuelCard, FuelCardStatus, FuelTransaction, FuelTransactionStatus, PumpOwner
from fuel.services import qr_codec
from fuel.services.fraud import run_fraud_checks
from fuel.services.state import TxAction, transition

logger = logging.getLogger(__name__)


@dataclass
class IssuedQR:
    transaction: FuelTransaction
    qr_code: str
    qr_image: str


def _amount(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError("Amount is required")
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number", received=str(value))
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    return amount


def _require_driver_owner(actor, tx: FuelTransaction):
    if not (actor.is_driver and tx.driver_id == actor.id):
        raise AccessError("This transaction belongs to another driver")


def _require_pump_staff(actor):
    if not actor.is_pump_staff:
        raise AccessError("Only pump staff can do this")


def _locked(tx) -> FuelTransaction:
    return FuelTransaction.objects.select_for_update().get(pk=tx.pk)


def _check_not_expired(tx, now):
    if tx.qr_code_expiry <= now:
        raise ExpiredError("QR code has expired", expired_at=tx.qr_code_expiry.isoformat())


def _find_by_token(qr_code: str, *, now) -> FuelTransaction:
    payload = qr_codec.decode(qr_code, now=now)
    tx = FuelTransaction.objects.filter(transaction_code=payload.get("transactionId"), qr_code=qr_code).first()
    if tx is None:
        raise NotFoundError("Transaction not found")
    return tx


def _deduct(card_id, amount, now):
    """Guarded decrement: no row is touched unless the balance covers ``amount``."""
    updated = FuelCard.objects.filter(pk=card_id, balance__gte=amount).update(
        balance=F("balance") - amount, last_used_at=now
    )
    if not updated:
        card = FuelCard.objects.get(pk=card_id)
        raise InsufficientBalanceError(balance=card.balance, required=amount)


def _apply_flags(tx: FuelTransaction, flags: dict, *, merge: bool, now):
    for field in FuelTransaction.FLAG_FIELDS:
        value = bool(flags.get(field))
        setattr(tx, field, (getattr(tx, field) or value) if merge else value)
    if flags.get("gps_mismatch_distance") is not None or not merge:
        tx.gps_mismatch_distance = flags.get("gps_mismatch_distance")

    if tx.has_fraud_flags:
        tx.status = transition(tx.status, TxAction.AUTO_FLAG)
        tx.flagged_at = tx.flagged_at or now
        tx.fraud_resolved = False
        logger.warning(
            "Fuel transaction %s flagged: %s",
            tx.transaction_code,
            ", ".join(f for f in FuelTransaction.FLAG_FIELDS if getattr(tx, f)),
        )


# --- driver side ------------------------------------------------------------

@transaction.atomic
def generate_qr(actor, *, vehicle_number, amount, latitude, longitude, address: str = "", now=None) -> IssuedQR:
    """Issue a pending transaction and its QR token. No money moves here."""
    if not actor.is_driver:
        raise AccessError("Only drivers can generate QR codes")
    number = (vehicle_number or "").strip().upper()
    if not number:
        raise ValidationError("Vehicle number is required")
    amount = _amount(amount)
    lat, lon = validate_coordinates(latitude, longitude)
    now = now or timezone.now()

    card = FuelCard.objects.filter(driver_id=actor.id, status=FuelCardStatus.ACTIVE).first()
    if card is None:
        raise NotFoundError("No active fuel card assigned to you")
    if card.balance < amount:
        raise InsufficientBalanceError(balance=card.balance, required=amount)

    code = unique_code(FuelTransaction, "transaction_code", "FTX")
    token = qr_codec.encode(
        qr_codec.build_payload(
            transaction_code=code,
            driver_id=actor.id,
            fuel_card_id=card.pk,
            amount=amount,
            vehicle_number=number,
            now=now,
        )
    )
    tx = FuelTransaction.objects.create(
        transaction_code=code,
        qr_code=token,
        qr_code_expiry=now + timedelta(seconds=fleet_setting("QR_TTL_SECONDS")),
        driver_id=actor.id,
        fuel_card=card,
        vehicle_number=number,
        amount=amount,
        requested_amount=amount,
        latitude=lat,
        longitude=lon,
        location_address=(address or "").strip(),
        status=FuelTransactionStatus.PENDING,
        created_at=now,
    )

    logger.info("Fuel transaction %s issued for driver %s (%s)", code, actor.id, amount)
    return IssuedQR(transaction=tx, qr_code=token, qr_image=qr_codec.render_data_url(token))


@transaction.atomic
def confirm_transaction(tx: FuelTransaction, actor, *, amount=None, now=None) -> FuelTransaction:
    _require_driver_owner(actor, tx)
    now = now or timezone.now()

    tx = _locked(tx)
    new_status = transition(tx.status, TxAction.CONFIRM)
    qr_codec.decode(tx.qr_code, now=now)
    _check_not_expired(tx, now)

    if amount is not None:
        amount = _amount(amount)
        if amount != tx.amount:
            card = FuelCard.objects.get(pk=tx.fuel_card_id)
            if card.balance < amount:
                raise InsufficientBalanceError(balance=card.balance, required=amount)
            tx.amount = amount

    tx.status = new_status
    tx.confirmed_at = now
    tx.save(update_fields=["status", "amount", "confirmed_at", "updated_at"])

    logger.info("Fuel transaction %s confirmed (%s)", tx.transaction_code, tx.amount)
    return tx


@transaction.atomic
def cancel_transaction(tx: FuelTransaction, actor, *, reason: str = "", now=None) -> FuelTransaction:
    if not actor.is_admin:
        _require_driver_owner(actor, tx)

    tx = _locked(tx)
    tx.status = transition(tx.status, TxAction.CANCEL)
    tx.cancelled_at = now or timezone.now()
    tx.cancelled_by_id = actor.id if actor.is_driver else None
    tx.cancel_reason = (reason or "").strip()[:255]
    tx.save(update_fields=["status", "cancelled_at", "cancelled_by", "cancel_reason", "updated_at"])

    logger.info("Fuel transaction %s cancelled", tx.transaction_code)
    return tx


@transaction.atomic
def upload_receipt(tx: FuelTransaction, actor, *, photo: str, now=None) -> FuelTransaction:
    """Attach a receipt and re-run fraud checks; new flags are merged into old ones."""
    _require_driver_owner(actor, tx)
    if not photo:
        raise ValidationError("Receipt photo is required")
    now = now or timezone.now()

    tx = _locked(tx)
    if tx.status != FuelTransactionStatus.COMPLETED:
        raise ConflictError("Receipt can only be uploaded for completed transactions", status=tx.status)

    tx.receipt_photo = photo
    tx.receipt_uploaded_at = now
    tx.receipt_uploaded_by_id = actor.id

    flags = run_fraud_checks(tx, pump_location=_pump_location(tx.pump_owner), now=now)
    _apply_flags(tx, flags, merge=True, now=now)
    tx.save()
    return tx


# --- pump side --------------------------------------------------------------

def validate_qr(actor, *, qr_code: str, now=None) -> FuelTransaction:
    """Pump staff scan: token must decode, be fresh, and point at a pending transaction."""
    _require_pump_staff(actor)
    now = now or timezone.now()
    tx = _find_by_token(qr_code, now=now)
    if tx.status != FuelTransactionStatus.PENDING:
        raise ConflictError(f"QR code is not valid for use. Transaction status: {tx.status}", status=tx.status)
    _check_not_expired(tx, now)
    return tx


def _pump_location(pump_owner: PumpOwner | None):
    if pump_owner is None or not pump_owner.has_location:
        return None
    return pump_owner.latitude, pump_owner.longitude


@transaction.atomic
def submit_transaction(
    actor,
    *,
    qr_code: str,
    amount,
    latitude,
    longitude,
    pump_owner_id=None,
    address: str = "",
    now=None,
) -> FuelTransaction:
    """
    confirmed -> completed. The card is debited here and only here; fraud
    checks then run and may move the transaction straight on to flagged.
    The debit stands either way.
    """
    _require_pump_staff(actor)
    if pump_owner_id is not None and int(pump_owner_id) != actor.pump_owner_id:
        raise AccessError("Pump staff can only submit for their own pump")
    amount = _amount(amount)
    lat, lon = validate_coordinates(latitude, longitude)
    now = now or timezone.now()

    tx = _locked(_find_by_token(qr_code, now=now))
    tx.status = transition(tx.status, TxAction.SUBMIT)
    _check_not_expired(tx, now)

    _deduct(tx.fuel_card_id, amount, now)

    pump_owner = PumpOwner.objects.get(pk=actor.pump_owner_id)
    tx.pump_owner = pump_owner
    tx.pump_staff_id = actor.id
    tx.amount = amount
    tx.latitude, tx.longitude = lat, lon
    tx.location_address = (address or "").strip()
    tx.completed_at = now

    flags = run_fraud_checks(tx, pump_location=_pump_location(pump_owner), now=now)
    _apply_flags(tx, flags, merge=False, now=now)
    tx.save()

    logger.info(
        "Fuel transaction %s submitted at pump %s: %s debited from card %s",
        tx.transaction_code, pump_owner.pk, amount, tx.fuel_card_id,
    )
    return tx
