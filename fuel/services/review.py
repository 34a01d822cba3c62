# fuel/services/review.py
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import AccessError, ConflictError, ValidationError
from fuel.models import FuelTransaction, FraudType
from fuel.services.state import TxAction, transition

logger = logging.getLogger(__name__)


def _require_admin(actor):
    if not actor.is_admin:
        raise AccessError("Only admins can review fraud alerts")


@transaction.atomic
def flag_transaction(tx: FuelTransaction, actor, *, fraud_type: str | None = None, reason: str = "", now=None) -> FuelTransaction:
    """Manual override: raise one flag, or all four when no type is given."""
    _require_admin(actor)
    if fraud_type and fraud_type not in FraudType.values:
        raise ValidationError("Unknown fraud type", received=fraud_type, allowed=list(FraudType.values))
    now = now or timezone.now()

    tx = FuelTransaction.objects.select_for_update().get(pk=tx.pk)
    tx.status = transition(tx.status, TxAction.ADMIN_FLAG)
    for field in [fraud_type] if fraud_type else FuelTransaction.FLAG_FIELDS:
        setattr(tx, field, True)
    tx.flagged_by_id = actor.user_id
    tx.flagged_at = now
    tx.fraud_resolved = False
    tx.fraud_resolved_at = None
    tx.fraud_resolved_by = None
    if reason:
        tx.notes = reason
    tx.save()

    logger.warning("Fuel transaction %s flagged by admin %s (%s)", tx.transaction_code, actor.user_id, fraud_type or "all")
    return tx


@transaction.atomic
def resolve_fraud_alert(tx: FuelTransaction, actor, *, is_fraud: bool, notes: str = "", now=None) -> FuelTransaction:
    """
    Close an alert. Confirmed fraud keeps the flags and the flagged status;
    otherwise the flags are cleared and the transaction returns to completed.
    """
    _require_admin(actor)
    now = now or timezone.now()

    tx = FuelTransaction.objects.select_for_update().get(pk=tx.pk)
    if not tx.has_fraud_flags:
        raise ConflictError("Transaction has no fraud flags", status=tx.status)

    tx.fraud_resolved = True
    tx.fraud_resolved_at = now
    tx.fraud_resolved_by_id = actor.user_id
    if not is_fraud:
        for field in FuelTransaction.FLAG_FIELDS:
            setattr(tx, field, False)
        tx.gps_mismatch_distance = None
        tx.status = transition(tx.status, TxAction.CLEAR)
    if notes:
        tx.notes = f"{tx.notes}\nResolution: {notes}" if tx.notes else f"Resolution: {notes}"
    tx.save()

    logger.info("Fuel transaction %s fraud alert resolved (fraud=%s)", tx.transaction_code, is_fraud)
    return tx
