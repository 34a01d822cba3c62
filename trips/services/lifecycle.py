# trips/services/lifecycle.py
import logging
import secrets
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.codes import unique_code
from core.conf import fleet_setting
from core.exceptions import AccessError, ConflictError, NotFoundError, SequenceError, ValidationError
from core.geo import validate_coordinates
from fleet.models import CompanyPermission, Vehicle, VehicleStatus
from fleet.services.vehicles import get_driver_for, get_vehicle_for
from trips.milestones import TOTAL_MILESTONES, backend_meaning, milestone_type
from trips.models import Trip, TripMilestone, TripStatus, TripType
from trips.services import events as trip_events
from trips.services.availability import has_active_trip
from trips.services.queue import activate_next_trip_safely
from trips.services.state import TripAction, completed_milestone_count, transition

logger = logging.getLogger(__name__)


# --- access helpers ---------------------------------------------------------

def _require_trip_manager(actor, transporter_id, perm):
    if not actor.acts_for_transporter(transporter_id):
        raise AccessError("Not allowed to manage trips of this transporter")
    if not actor.has_permission(perm):
        raise AccessError(f"Missing permission: {perm}")


def _is_owner(actor, trip) -> bool:
    return actor.is_transporter and actor.transporter_id == trip.transporter_id


def _is_assigned_driver(actor, trip) -> bool:
    return actor.is_driver and trip.driver_id is not None and trip.driver_id == actor.id


def _require_owner_or_driver(actor, trip):
    if not (_is_owner(actor, trip) or _is_assigned_driver(actor, trip)):
        raise AccessError("Only the owning transporter or the assigned driver can do this")


def _locked(trip) -> Trip:
    return Trip.objects.select_for_update().get(pk=trip.pk)


def _apply_location(trip, prefix, loc):
    if loc is None:
        setattr(trip, f"{prefix}_address", "")
        setattr(trip, f"{prefix}_lat", None)
        setattr(trip, f"{prefix}_lon", None)
        return
    lat, lon = validate_coordinates(loc.get("lat"), loc.get("lon"))
    setattr(trip, f"{prefix}_address", (loc.get("address") or "").strip())
    setattr(trip, f"{prefix}_lat", lat)
    setattr(trip, f"{prefix}_lon", lon)


def _resolve_vehicle(vehicle_id, transporter_id):
    vehicle = get_vehicle_for(vehicle_id, transporter_id=transporter_id)
    if vehicle.status != VehicleStatus.ACTIVE:
        raise ConflictError("Vehicle is not active", vehicle_id=vehicle.pk, vehicle_status=vehicle.status)
    return vehicle


# --- create / update --------------------------------------------------------

@transaction.atomic
def create_trip(
    actor,
    *,
    trip_type: str,
    vehicle_id=None,
    driver_id=None,
    container_number: str = "",
    reference: str = "",
    pickup: dict | None = None,
    drop: dict | None = None,
    now=None,
    events=None,
) -> Trip:
    if actor.transporter_id is None:
        raise AccessError("Only transporters can create trips")
    _require_trip_manager(actor, actor.transporter_id, CompanyPermission.CREATE_TRIPS)

    if trip_type not in TripType.values:
        raise ValidationError("trip_type must be IMPORT or EXPORT", received=trip_type)

    trip = Trip(
        transporter_id=actor.transporter_id,
        trip_type=trip_type,
        container_number=(container_number or "").strip().upper(),
        reference=(reference or "").strip(),
        status=TripStatus.PLANNED,
        created_at=now or timezone.now(),
    )
    if vehicle_id:
        trip.vehicle = _resolve_vehicle(vehicle_id, actor.transporter_id)
    if driver_id:
        trip.driver = get_driver_for(driver_id, transporter_id=actor.transporter_id)
    _apply_location(trip, "pickup", pickup)
    _apply_location(trip, "drop", drop)
    if actor.is_company_user:
        trip.created_by_company_user_id = actor.id

    trip.trip_code = unique_code(Trip, "trip_code", "TRIP")
    trip.save()

    logger.info("Trip %s created (%s) by %s %s", trip.trip_code, trip.trip_type, actor.role, actor.id)
    trip_events.trip_created(trip, events=events)
    return trip


_UNSET = object()


@transaction.atomic
def update_trip(
    trip: Trip,
    actor,
    *,
    vehicle_id=_UNSET,
    driver_id=_UNSET,
    container_number=None,
    reference=None,
    pickup=_UNSET,
    drop=_UNSET,
) -> Trip:
    """Edit a trip that has not started yet. Trip type is fixed at creation."""
    _require_trip_manager(actor, trip.transporter_id, CompanyPermission.CREATE_TRIPS)
    trip = _locked(trip)
    if trip.status != TripStatus.PLANNED:
        raise ConflictError("Only PLANNED trips can be edited", status=trip.status)

    if vehicle_id is not _UNSET:
        trip.vehicle = _resolve_vehicle(vehicle_id, trip.transporter_id) if vehicle_id else None
    if driver_id is not _UNSET:
        trip.driver = get_driver_for(driver_id, transporter_id=trip.transporter_id) if driver_id else None
    if container_number is not None:
        trip.container_number = container_number.strip().upper()
    if reference is not None:
        trip.reference = reference.strip()
    if pickup is not _UNSET:
        _apply_location(trip, "pickup", pickup)
    if drop is not _UNSET:
        _apply_location(trip, "drop", drop)

    trip.save()
    return trip


# --- state transitions ------------------------------------------------------

def start_trip(trip: Trip, actor, *, now=None, events=None) -> Trip:
    """PLANNED -> ACTIVE, gated on the vehicle being active and otherwise idle."""
    _require_owner_or_driver(actor, trip)
    now = now or timezone.now()

    with transaction.atomic():
        trip = _locked(trip)
        transition(trip.status, TripAction.START)
        if trip.vehicle_id is None:
            raise ConflictError("Trip has no vehicle assigned")

        vehicle = Vehicle.objects.select_for_update().get(pk=trip.vehicle_id)
        if vehicle.status != VehicleStatus.ACTIVE:
            raise ConflictError("Vehicle is not active", vehicle_id=vehicle.pk, vehicle_status=vehicle.status)
        if has_active_trip(vehicle.pk, exclude_trip_id=trip.pk):
            raise ConflictError(
                "Vehicle already has an active trip. Complete it before starting another.",
                vehicle_id=vehicle.pk,
            )

        updated = Trip.objects.filter(pk=trip.pk, status=TripStatus.PLANNED).update(
            status=TripStatus.ACTIVE, started_at=now, updated_at=now
        )
        if not updated:
            raise ConflictError("Trip is no longer PLANNED")
        trip.refresh_from_db()

    logger.info("Trip %s started by %s %s", trip.trip_code, actor.role, actor.id)
    trip_events.trip_started(trip, events=events)
    return trip


def record_milestone(
    trip: Trip,
    actor,
    *,
    milestone_number,
    latitude,
    longitude,
    photo: str = "",
    now=None,
    events=None,
) -> TripMilestone:
    """Append the next milestone. Numbers must arrive strictly in order."""
    if not _is_assigned_driver(actor, trip):
        raise AccessError("Only the assigned driver can update milestones")

    if isinstance(milestone_number, bool) or not isinstance(milestone_number, int):
        raise ValidationError("milestone_number must be an integer", received=milestone_number)
    if not 1 <= milestone_number <= TOTAL_MILESTONES:
        raise ValidationError(f"milestone_number must be between 1 and {TOTAL_MILESTONES}", received=milestone_number)
    lat, lon = validate_coordinates(latitude, longitude)
    now = now or timezone.now()

    with transaction.atomic():
        trip = _locked(trip)
        if trip.status != TripStatus.ACTIVE:
            raise ConflictError("Trip is not active", status=trip.status)

        completed = completed_milestone_count(trip)
        if milestone_number != completed + 1:
            raise SequenceError(expected=completed + 1, received=milestone_number, completed=completed)

        mtype = milestone_type(milestone_number)
        try:
            with transaction.atomic():
                milestone = TripMilestone.objects.create(
                    trip=trip,
                    milestone_number=milestone_number,
                    milestone_type=mtype,
                    backend_meaning=backend_meaning(mtype, trip.trip_type),
                    timestamp=now,
                    latitude=lat,
                    longitude=lon,
                    photo=photo or "",
                    recorded_by_id=actor.id,
                )
        except IntegrityError:
            # lost the race to a concurrent submission of the same number
            raise SequenceError(expected=milestone_number + 1, received=milestone_number, completed=milestone_number)

        Trip.objects.filter(pk=trip.pk).update(updated_at=now)

    logger.info("Trip %s milestone %s (%s) recorded", trip.trip_code, milestone_number, mtype)
    trip_events.milestone_updated(trip, milestone, events=events)
    return milestone


def complete_trip(trip: Trip, actor, *, now=None, events=None) -> tuple[Trip, Trip | None]:
    """
    ACTIVE -> COMPLETED once all five milestones exist.

    Returns ``(trip, next_trip)`` where ``next_trip`` is the queued trip that
    was auto-activated on the same vehicle, if any.
    """
    _require_owner_or_driver(actor, trip)
    now = now or timezone.now()

    with transaction.atomic():
        trip = _locked(trip)
        transition(trip.status, TripAction.COMPLETE)
        completed = completed_milestone_count(trip)
        if completed != TOTAL_MILESTONES:
            raise ConflictError(
                "All milestones must be completed before completing the trip",
                completedMilestones=completed,
                requiredMilestones=TOTAL_MILESTONES,
            )
        trip.status = TripStatus.COMPLETED
        trip.completed_at = now
        trip.save(update_fields=["status", "completed_at", "updated_at"])

    logger.info("Trip %s completed", trip.trip_code)
    trip_events.trip_completed(trip, events=events)

    next_trip = activate_next_trip_safely(trip.vehicle_id, now=now, events=events)
    return trip, next_trip


@transaction.atomic
def cancel_trip(trip: Trip, actor, *, reason: str = "", now=None) -> Trip:
    """PLANNED -> CANCELLED for the owner side; ACTIVE -> CANCELLED for admins only."""
    if not actor.is_admin:
        _require_trip_manager(actor, trip.transporter_id, CompanyPermission.CREATE_TRIPS)

    trip = _locked(trip)
    trip.status = transition(trip.status, TripAction.CANCEL, privileged=actor.is_admin)
    trip.cancelled_at = now or timezone.now()
    trip.cancel_reason = (reason or "").strip()[:255]
    trip.save(update_fields=["status", "cancelled_at", "cancel_reason", "updated_at"])

    logger.info("Trip %s cancelled by %s %s", trip.trip_code, actor.role, actor.id)
    return trip


# --- proof of delivery ------------------------------------------------------

@transaction.atomic
def upload_pod(trip: Trip, actor, *, photo: str, now=None) -> Trip:
    _require_owner_or_driver(actor, trip)
    if not photo:
        raise ValidationError("POD photo is required")

    trip = _locked(trip)
    trip.status = transition(trip.status, TripAction.UPLOAD_POD)
    trip.pod_photo = photo
    trip.pod_uploaded_at = now or timezone.now()
    trip.pod_uploaded_by_role = actor.role
    trip.pod_uploaded_by_id = actor.id
    trip.pod_approved_at = None
    trip.pod_approved_by = None
    trip.save()

    logger.info("Trip %s POD uploaded by %s %s", trip.trip_code, actor.role, actor.id)
    return trip


@transaction.atomic
def approve_pod(trip: Trip, actor, *, now=None) -> Trip:
    if not _is_owner(actor, trip):
        raise AccessError("Only the owning transporter can approve POD")

    trip = _locked(trip)
    trip.status = transition(trip.status, TripAction.APPROVE_POD)
    if not trip.pod_photo:
        raise ValidationError("No POD uploaded for this trip")
    trip.pod_approved_at = now or timezone.now()
    trip.pod_approved_by_id = actor.transporter_id
    trip.save(update_fields=["status", "pod_approved_at", "pod_approved_by", "updated_at"])

    logger.info("Trip %s POD approved", trip.trip_code)
    return trip


# --- public share link ------------------------------------------------------

@transaction.atomic
def share_trip(trip: Trip, actor, *, expiry_hours=None, expiry_days=None, now=None) -> Trip:
    """Issue a fresh random read-only token. Days take precedence over hours."""
    if not actor.is_admin:
        _require_trip_manager(actor, trip.transporter_id, CompanyPermission.VIEW_TRIPS)

    if expiry_days:
        ttl = timedelta(days=int(expiry_days))
    else:
        ttl = timedelta(hours=int(expiry_hours or fleet_setting("SHARE_LINK_DEFAULT_HOURS")))
    if ttl <= timedelta(0):
        raise ValidationError("Share link expiry must be positive")

    trip.share_token = secrets.token_hex(32)
    trip.share_token_expiry = (now or timezone.now()) + ttl
    trip.save(update_fields=["share_token", "share_token_expiry", "updated_at"])
    return trip


def get_shared_trip(token: str, *, now=None) -> Trip:
    """Unknown and expired tokens look the same to the caller."""
    now = now or timezone.now()
    trip = (
        Trip.objects.select_related("vehicle", "driver")
        .filter(share_token=token, share_token_expiry__gt=now)
        .first()
        if token else None
    )
    if trip is None:
        raise NotFoundError("Trip not found or link expired")
    return trip
