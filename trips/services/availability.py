# trips/services/availability.py
from trips.models import Trip, TripStatus


class VehicleState:
    ACTIVE = "ACTIVE"
    QUEUED = "QUEUED"
    AVAILABLE = "AVAILABLE"


def has_active_trip(vehicle_id, *, exclude_trip_id=None) -> bool:
    qs = Trip.objects.filter(vehicle_id=vehicle_id, status=TripStatus.ACTIVE)
    if exclude_trip_id is not None:
        qs = qs.exclude(pk=exclude_trip_id)
    return qs.exists()


def queued_trip_count(vehicle_id) -> int:
    return Trip.objects.filter(vehicle_id=vehicle_id, status=TripStatus.PLANNED).count()


def has_trip_history(vehicle_id) -> bool:
    return Trip.objects.filter(vehicle_id=vehicle_id).exists()


def vehicle_state(vehicle_id) -> str:
    if has_active_trip(vehicle_id):
        return VehicleState.ACTIVE
    if queued_trip_count(vehicle_id):
        return VehicleState.QUEUED
    return VehicleState.AVAILABLE


def vehicle_availability(vehicle_id) -> dict:
    """Read-side snapshot; nothing here is stored on the vehicle."""
    active = has_active_trip(vehicle_id)
    queued = queued_trip_count(vehicle_id)
    if active:
        state = VehicleState.ACTIVE
    elif queued:
        state = VehicleState.QUEUED
    else:
        state = VehicleState.AVAILABLE
    return {
        "vehicle_id": vehicle_id,
        "state": state,
        "has_active_trip": active,
        "queued_trips_count": queued,
        "has_trip_history": has_trip_history(vehicle_id),
        "is_available": not active,
    }
