# trips/services/queue.py
import logging

from django.db import transaction
from django.utils import timezone

from trips.models import Trip, TripStatus
from trips.services import events as trip_events
from trips.services.availability import has_active_trip

logger = logging.getLogger(__name__)


def get_active_trip(vehicle_id) -> Trip | None:
    return Trip.objects.filter(vehicle_id=vehicle_id, status=TripStatus.ACTIVE).first()


def get_queued_trips(vehicle_id):
    """PLANNED trips for the vehicle, oldest first."""
    return Trip.objects.filter(vehicle_id=vehicle_id, status=TripStatus.PLANNED).order_by("created_at", "id")


def get_vehicle_queue_status(vehicle_id) -> dict:
    active = get_active_trip(vehicle_id)
    queued = list(get_queued_trips(vehicle_id))
    return {
        "has_active_trip": active is not None,
        "active_trip": active,
        "queued_count": len(queued),
        "queued_trips": queued,
    }


@transaction.atomic
def activate_next_trip(vehicle_id, *, now=None) -> Trip | None:
    """
    Promote the oldest PLANNED trip of a vehicle to ACTIVE.

    Returns None when nothing is queued, or when the vehicle already has an
    ACTIVE trip. The promotion is a conditional update on status so a trip
    started concurrently by hand is never activated twice.
    """
    if vehicle_id is None:
        return None

    from fleet.models import Vehicle

    # serialise activation per vehicle
    Vehicle.objects.select_for_update().filter(pk=vehicle_id).first()

    if has_active_trip(vehicle_id):
        logger.warning("Vehicle %s already has an active trip; auto-activation skipped", vehicle_id)
        return None

    candidate = get_queued_trips(vehicle_id).first()
    if candidate is None:
        return None

    now = now or timezone.now()
    updated = Trip.objects.filter(pk=candidate.pk, status=TripStatus.PLANNED).update(
        status=TripStatus.ACTIVE, started_at=now, updated_at=now
    )
    if not updated:
        return None

    candidate.refresh_from_db()
    logger.info("Trip %s auto-activated on vehicle %s", candidate.trip_code, vehicle_id)
    return candidate


def activate_next_trip_safely(vehicle_id, *, now=None, events=None) -> Trip | None:
    """
    Best-effort follow-up to a trip completion: failures are logged and
    swallowed so the completion that triggered it stands.
    """
    try:
        with transaction.atomic():
            trip = activate_next_trip(vehicle_id, now=now)
    except Exception:
        logger.exception("Auto-activation failed for vehicle %s", vehicle_id)
        return None
    if trip is not None:
        trip_events.trip_auto_activated(trip, events=events)
    return trip
