# fleet/services/vehicles.py
import logging

from django.db import IntegrityError, transaction

from core.exceptions import AccessError, ConflictError, NotFoundError, ValidationError
from fleet.models import CompanyPermission, Driver, OwnerType, Transporter, Vehicle, VehicleStatus

logger = logging.getLogger(__name__)


def normalize_vehicle_number(value) -> str:
    number = (value or "").strip().upper()
    if not number:
        raise ValidationError("Vehicle number is required")
    return number


def can_use_vehicle(vehicle: Vehicle, transporter_id) -> bool:
    """Owner of the record, or a transporter currently hiring it."""
    if vehicle.transporter_id == transporter_id:
        return True
    return vehicle.hired_by.filter(pk=transporter_id).exists()


def get_vehicle_by_id(vehicle_id) -> Vehicle:
    try:
        return Vehicle.objects.get(pk=vehicle_id)
    except Vehicle.DoesNotExist:
        raise NotFoundError("Vehicle not found", vehicle_id=vehicle_id)


def get_vehicle_for(vehicle_id, *, transporter_id) -> Vehicle:
    vehicle = get_vehicle_by_id(vehicle_id)
    if not can_use_vehicle(vehicle, transporter_id):
        raise AccessError("Vehicle does not belong to this transporter")
    return vehicle


def get_driver_for(driver_id, *, transporter_id) -> Driver:
    try:
        driver = Driver.objects.get(pk=driver_id)
    except Driver.DoesNotExist:
        raise NotFoundError("Driver not found", driver_id=driver_id)
    if driver.transporter_id != transporter_id:
        raise AccessError("Driver does not belong to this transporter")
    return driver


def _require_vehicle_manager(actor, transporter_id):
    if actor.is_admin:
        return
    if not actor.acts_for_transporter(transporter_id):
        raise AccessError("Only the owning transporter can manage this vehicle")
    if not actor.has_permission(CompanyPermission.MANAGE_VEHICLES):
        raise AccessError("Missing permission: manage_vehicles")


@transaction.atomic
def register_vehicle(
    transporter: Transporter,
    *,
    vehicle_number: str,
    owner_type: str = OwnerType.OWN,
    driver: Driver | None = None,
    trailer_type: str | None = None,
) -> Vehicle:
    number = normalize_vehicle_number(vehicle_number)
    if owner_type not in OwnerType.values:
        raise ValidationError("owner_type must be OWN or HIRED", received=owner_type)
    if driver is not None and driver.transporter_id != transporter.pk:
        raise AccessError("Driver does not belong to this transporter")

    if owner_type == OwnerType.OWN:
        if Vehicle.objects.filter(vehicle_number=number, owner_type=OwnerType.OWN).exists():
            raise ConflictError("Vehicle already registered as OWN", vehicle_number=number)
        original = None
    else:
        original = (
            Vehicle.objects.select_for_update()
            .filter(vehicle_number=number, owner_type=OwnerType.OWN)
            .first()
        )
        if original is None:
            raise ValidationError(
                "Vehicle is not registered by any owner. Only OWN vehicles can be hired.",
                vehicle_number=number,
            )
        if original.transporter_id == transporter.pk:
            raise ConflictError("You already own this vehicle", vehicle_number=number)
        if Vehicle.objects.filter(
            vehicle_number=number, owner_type=OwnerType.HIRED, transporter=transporter
        ).exists():
            raise ConflictError("You have already hired this vehicle", vehicle_number=number)

    try:
        vehicle = Vehicle.objects.create(
            vehicle_number=number,
            transporter=transporter,
            owner_type=owner_type,
            original_owner_id=original.transporter_id if original else transporter.pk,
            driver=driver,
            trailer_type=trailer_type or "",
        )
    except IntegrityError:
        raise ConflictError("Vehicle already registered", vehicle_number=number)

    if original is not None:
        original.hired_by.add(transporter)

    logger.info("Vehicle %s registered by transporter %s (%s)", number, transporter.pk, owner_type)
    return vehicle


@transaction.atomic
def update_vehicle(vehicle: Vehicle, actor, *, driver: Driver | None = None, trailer_type=None, status=None) -> Vehicle:
    _require_vehicle_manager(actor, vehicle.transporter_id)
    fields = []
    if driver is not None:
        if driver.transporter_id != vehicle.transporter_id:
            raise AccessError("Driver does not belong to this transporter")
        vehicle.driver = driver
        fields.append("driver")
    if trailer_type is not None:
        vehicle.trailer_type = trailer_type
        fields.append("trailer_type")
    if status is not None:
        if status not in VehicleStatus.values:
            raise ValidationError("status must be active or inactive", received=status)
        vehicle.status = status
        fields.append("status")
    if fields:
        vehicle.save(update_fields=fields + ["updated_at"])
    return vehicle


def disable_vehicle(vehicle: Vehicle, actor) -> Vehicle:
    """Soft-disable; the only removal allowed once a vehicle has trips."""
    vehicle = update_vehicle(vehicle, actor, status=VehicleStatus.INACTIVE)
    logger.info("Vehicle %s disabled", vehicle.vehicle_number)
    return vehicle


@transaction.atomic
def delete_vehicle(vehicle: Vehicle, actor) -> None:
    from trips.services.availability import has_trip_history

    _require_vehicle_manager(actor, vehicle.transporter_id)
    if has_trip_history(vehicle.pk):
        raise ConflictError(
            "Vehicle has trip history and cannot be deleted. Disable it instead.",
            vehicle_id=vehicle.pk,
        )

    if vehicle.owner_type == OwnerType.HIRED:
        original = Vehicle.objects.filter(
            vehicle_number=vehicle.vehicle_number, owner_type=OwnerType.OWN
        ).first()
        if original is not None:
            original.hired_by.remove(vehicle.transporter_id)
    else:
        vehicle.hired_by.clear()

    number = vehicle.vehicle_number
    vehicle.delete()
    logger.info("Vehicle %s deleted", number)
