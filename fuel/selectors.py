# fuel/selectors.py
from core.exceptions import AccessError, NotFoundError
from fuel.models import FuelTransaction


def transactions_for(actor):
    qs = FuelTransaction.objects.select_related("driver", "fuel_card", "pump_owner", "pump_staff")
    if actor.is_admin:
        return qs
    if actor.is_driver:
        return qs.filter(driver_id=actor.id)
    if actor.is_pump_staff:
        return qs.filter(pump_staff_id=actor.id)
    if actor.role == "pump_owner":
        return qs.filter(pump_owner_id=actor.pump_owner_id)
    if actor.transporter_id is not None:
        return qs.filter(driver__transporter_id=actor.transporter_id)
    return qs.none()


def get_transaction_for(actor, pk) -> FuelTransaction:
    tx = transactions_for(actor).filter(pk=pk).first()
    if tx is None:
        if FuelTransaction.objects.filter(pk=pk).exists():
            raise AccessError("Not allowed to access this transaction")
        raise NotFoundError("Transaction not found", transaction_id=pk)
    return tx


def filter_transactions(qs, *, status=None, vehicle_number=None, start_date=None, end_date=None):
    if status:
        qs = qs.filter(status=status)
    if vehicle_number:
        qs = qs.filter(vehicle_number=vehicle_number.strip().upper())
    if start_date:
        qs = qs.filter(created_at__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__lte=end_date)
    return qs


def receipt_view(tx: FuelTransaction) -> dict:
    """Flattened receipt for display or print."""
    return {
        "transaction_code": tx.transaction_code,
        "date": tx.completed_at or tx.created_at,
        "status": tx.status,
        "driver": {
            "id": tx.driver_id,
            "name": tx.driver.name if tx.driver_id else None,
            "mobile": tx.driver.mobile if tx.driver_id else None,
        },
        "vehicle_number": tx.vehicle_number,
        "pump": {
            "id": tx.pump_owner_id,
            "name": str(tx.pump_owner) if tx.pump_owner_id else None,
            "staff": tx.pump_staff.name if tx.pump_staff_id else None,
        },
        "amount": str(tx.amount),
        "fuel_card": tx.fuel_card.card_number if tx.fuel_card_id else None,
        "receipt_photo": tx.receipt_photo or None,
        "location": {
            "latitude": tx.latitude,
            "longitude": tx.longitude,
            "address": tx.location_address or None,
        },
    }
