# fuel/services/fraud.py
"""
Fraud heuristics for completed fuel transactions.

Each check is independent and returns its own verdict; ``run_fraud_checks``
collects them into a flag dict that is stored field by field for triage.
"""
import logging
import math
from datetime import timedelta

from django.db.models import Q
from django.utils import timezone

from core.conf import fleet_setting
from core.exceptions import ValidationError
from core.geo import haversine_km
from fuel.models import FuelTransaction, FuelTransactionStatus, FraudType

logger = logging.getLogger(__name__)


def check_duplicate_receipt(driver_id, receipt_photo, exclude_id=None) -> bool:
    if not receipt_photo:
        return False
    qs = FuelTransaction.objects.filter(
        driver_id=driver_id,
        receipt_photo=receipt_photo,
        status__in=[FuelTransactionStatus.COMPLETED, FuelTransactionStatus.CONFIRMED],
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def check_gps_mismatch(tx_lat, tx_lon, pump_lat, pump_lon, threshold_km=None) -> tuple[bool, float]:
    """Returns ``(is_mismatch, distance_km)``; distance rounded to 2 decimals."""
    threshold = fleet_setting("FRAUD_GPS_THRESHOLD_KM") if threshold_km is None else threshold_km
    distance = haversine_km(tx_lat, tx_lon, pump_lat, pump_lon)
    return distance > threshold, round(distance, 2)


def check_express_uploads(driver_id, *, now=None, exclude_id=None) -> bool:
    now = now or timezone.now()
    window = now - timedelta(minutes=fleet_setting("FRAUD_EXPRESS_WINDOW_MINUTES"))
    qs = FuelTransaction.objects.filter(
        driver_id=driver_id,
        status=FuelTransactionStatus.COMPLETED,
        receipt_uploaded_at__gte=window,
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.count() >= fleet_setting("FRAUD_EXPRESS_THRESHOLD")


def is_outlier(amount, history, z_threshold=None) -> bool:
    """z-score of ``amount`` against the population std of ``history``."""
    z_threshold = fleet_setting("FRAUD_PATTERN_Z_THRESHOLD") if z_threshold is None else z_threshold
    values = [float(v) for v in history]
    mean = sum(values) / len(values)
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    z = abs(float(amount) - mean) / (std or 1)
    return z > z_threshold


def check_unusual_pattern(driver_id, amount, *, now=None, exclude_id=None) -> bool:
    now = now or timezone.now()
    since = now - timedelta(days=fleet_setting("FRAUD_PATTERN_LOOKBACK_DAYS"))
    qs = FuelTransaction.objects.filter(
        driver_id=driver_id,
        status=FuelTransactionStatus.COMPLETED,
        created_at__gte=since,
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    history = list(qs.order_by("-created_at", "-id").values_list("amount", flat=True)[: fleet_setting("FRAUD_PATTERN_SAMPLE_SIZE")])
    if len(history) < fleet_setting("FRAUD_PATTERN_MIN_SAMPLES"):
        return False
    return is_outlier(amount, history)


def run_fraud_checks(tx: FuelTransaction, *, pump_location=None, now=None) -> dict:
    """
    ``pump_location`` is ``(lat, lon)`` or None; without it, or without a
    transaction location, the GPS check is skipped.
    """
    flags = {
        "duplicate_receipt": False,
        "gps_mismatch": False,
        "gps_mismatch_distance": None,
        "express_uploads": False,
        "unusual_pattern": False,
    }

    if tx.receipt_photo:
        flags["duplicate_receipt"] = check_duplicate_receipt(tx.driver_id, tx.receipt_photo, exclude_id=tx.pk)

    if pump_location and tx.latitude is not None and tx.longitude is not None:
        mismatch, distance = check_gps_mismatch(tx.latitude, tx.longitude, *pump_location)
        flags["gps_mismatch"] = mismatch
        flags["gps_mismatch_distance"] = distance

    flags["express_uploads"] = check_express_uploads(tx.driver_id, now=now, exclude_id=tx.pk)

    if tx.amount:
        flags["unusual_pattern"] = check_unusual_pattern(tx.driver_id, tx.amount, now=now, exclude_id=tx.pk)

    return flags


def any_flag(flags: dict) -> bool:
    return any(flags.get(f) for f in FuelTransaction.FLAG_FIELDS)


def alerts_queryset(*, resolved=None, fraud_type=None, start_date=None, end_date=None):
    """Transactions carrying at least one fraud flag."""
    if fraud_type:
        if fraud_type not in FuelTransaction.FLAG_FIELDS:
            raise ValidationError("Unknown fraud type", received=fraud_type, allowed=list(FraudType.values))
        qs = FuelTransaction.objects.filter(**{fraud_type: True})
    else:
        qs = FuelTransaction.objects.filter(_any_flag_q())
    if resolved is not None:
        qs = qs.filter(fraud_resolved=resolved)
    if start_date:
        qs = qs.filter(created_at__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__lte=end_date)
    return qs.select_related("driver", "fuel_card", "pump_owner").order_by("-created_at", "-id")


def _any_flag_q() -> Q:
    q = Q()
    for field in FuelTransaction.FLAG_FIELDS:
        q |= Q(**{field: True})
    return q


def fraud_statistics(*, start_date=None, end_date=None) -> dict:
    base = FuelTransaction.objects.filter(fraud_resolved=False)
    if start_date:
        base = base.filter(created_at__gte=start_date)
    if end_date:
        base = base.filter(created_at__lte=end_date)
    return {
        "total_flagged": base.filter(_any_flag_q()).count(),
        "by_type": {
            field: base.filter(**{field: True}).count()
            for field in FuelTransaction.FLAG_FIELDS
        },
    }
