# trips/selectors.py
from django.db.models import Q

from core.exceptions import AccessError, NotFoundError
from fleet.models import CompanyPermission
from trips.models import Trip, TripStatus


def trips_for(actor):
    qs = Trip.objects.select_related("vehicle", "driver", "transporter").prefetch_related("milestones")
    if actor.is_admin:
        return qs
    if actor.is_driver:
        return qs.filter(driver_id=actor.id)
    if actor.transporter_id is not None and actor.has_permission(CompanyPermission.VIEW_TRIPS):
        return qs.filter(transporter_id=actor.transporter_id)
    return qs.none()


def can_view_trip(actor, trip) -> bool:
    if actor.is_admin:
        return True
    if actor.is_driver:
        return trip.driver_id == actor.id
    return actor.acts_for_transporter(trip.transporter_id) and actor.has_permission(CompanyPermission.VIEW_TRIPS)


def get_trip_for(actor, trip_id) -> Trip:
    trip = Trip.objects.select_related("vehicle", "driver").filter(pk=trip_id).first()
    if trip is None:
        raise NotFoundError("Trip not found", trip_id=trip_id)
    if not can_view_trip(actor, trip):
        raise AccessError("Not allowed to access this trip")
    return trip


def filter_trips(qs, *, status=None, vehicle_id=None, driver_id=None, trip_type=None,
                 start_date=None, end_date=None, q=None):
    if status:
        qs = qs.filter(status__in=[s.strip().upper() for s in status.split(",") if s.strip()])
    if vehicle_id:
        qs = qs.filter(vehicle_id=vehicle_id)
    if driver_id:
        qs = qs.filter(driver_id=driver_id)
    if trip_type:
        qs = qs.filter(trip_type=trip_type)
    if start_date:
        qs = qs.filter(created_at__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__lte=end_date)
    if q:
        qs = search_trips(qs, q)
    return qs


def search_trips(qs, term: str):
    """Case-insensitive match on container number, reference or trip code."""
    term = (term or "").strip()
    if not term:
        return qs
    return qs.filter(
        Q(container_number__icontains=term) | Q(reference__icontains=term) | Q(trip_code__icontains=term)
    )


def active_trips(actor):
    return trips_for(actor).filter(status=TripStatus.ACTIVE)


def pending_pod_trips(actor):
    """POD uploaded but not yet approved, newest upload first."""
    return (
        trips_for(actor)
        .filter(status=TripStatus.POD_PENDING, pod_uploaded_at__isnull=False, pod_approved_at__isnull=True)
        .order_by("-pod_uploaded_at", "-id")
    )
