from datetime import timedelta

import pytest

from core.events import channel
from core.exceptions import AccessError, ConflictError, NotFoundError, SequenceError, ValidationError
from fleet.models import Vehicle, VehicleStatus
from trips.models import Trip, TripStatus
from trips.services import lifecycle
from trips.services.events import TRIP_CREATED, TRIP_MILESTONE_UPDATED, TRIP_STARTED
from trips.services.state import all_milestones_completed


# --- create -----------------------------------------------------------------

def test_create_trip_is_planned_and_announced(make_trip, transporter, sink):
    trip = make_trip(container_number=" msku1234567 ", reference="PO-77")

    assert trip.status == TripStatus.PLANNED
    assert trip.trip_code.startswith("TRIP-")
    assert trip.container_number == "MSKU1234567"
    assert sink.for_channel(channel("transporter", transporter.pk))[0][0] == TRIP_CREATED
    assert sink.names() == [TRIP_CREATED]


def test_create_trip_rejects_unknown_type(make_trip):
    with pytest.raises(ValidationError):
        make_trip(trip_type="DOMESTIC")


def test_create_trip_rejects_foreign_vehicle(make_trip, other_transporter):
    foreign = Vehicle.objects.create(vehicle_number="KA01ZZ0001", transporter=other_transporter)
    with pytest.raises(AccessError):
        make_trip(vehicle_id=foreign.pk)


def test_create_trip_rejects_inactive_vehicle(make_trip, vehicle):
    vehicle.status = VehicleStatus.INACTIVE
    vehicle.save()
    with pytest.raises(ConflictError):
        make_trip()


def test_create_trip_requires_location_coordinates(make_trip):
    with pytest.raises(ValidationError):
        make_trip(pickup={"address": "JNPT gate 4", "lat": None, "lon": 72.95})

    trip = make_trip(pickup={"address": "JNPT gate 4", "lat": 18.95, "lon": 72.95})
    assert (trip.pickup_lat, trip.pickup_lon) == (18.95, 72.95)


def test_company_user_needs_create_permission(company_user_factory, vehicle, sink, now):
    viewer = company_user_factory(["view_trips"])
    with pytest.raises(AccessError):
        lifecycle.create_trip(viewer, trip_type="IMPORT", vehicle_id=vehicle.pk, now=now, events=sink)

    planner = company_user_factory(["create_trips"], mobile="9200000002")
    trip = lifecycle.create_trip(planner, trip_type="IMPORT", vehicle_id=vehicle.pk, now=now, events=sink)
    assert trip.created_by_company_user_id == planner.id


def test_update_trip_only_while_planned(make_trip, owner, driver_act, now, other_driver):
    trip = make_trip()
    trip = lifecycle.update_trip(trip, owner, reference="PO-99", driver_id=other_driver.pk)
    assert trip.reference == "PO-99"
    assert trip.driver_id == other_driver.pk

    trip = lifecycle.update_trip(trip, owner, driver_id=None)
    lifecycle.start_trip(trip, owner, now=now)
    with pytest.raises(ConflictError):
        lifecycle.update_trip(trip, owner, reference="late")


# --- start ------------------------------------------------------------------

def test_start_trip_fans_out_to_four_channels(make_trip, driver_act, sink, now, transporter, driver, vehicle):
    trip = make_trip()
    sink.clear()

    trip = lifecycle.start_trip(trip, driver_act, now=now, events=sink)

    assert trip.status == TripStatus.ACTIVE
    assert trip.started_at == now
    for key in (
        channel("transporter", transporter.pk),
        channel("driver", driver.pk),
        channel("vehicle", vehicle.pk),
        channel("trip", trip.pk),
    ):
        name, payload = sink.for_channel(key)[0]
        assert name == TRIP_STARTED
        assert payload["currentMilestone"] == {"number": 1, "type": "CONTAINER_PICKED", "label": "Container Pick up"}
        assert payload["trip"]["status"] == "ACTIVE"


def test_only_owner_or_assigned_driver_may_start(make_trip, other_driver_act, company_user_factory, now):
    trip = make_trip()
    with pytest.raises(AccessError):
        lifecycle.start_trip(trip, other_driver_act, now=now)
    with pytest.raises(AccessError):
        lifecycle.start_trip(trip, company_user_factory(["create_trips"]), now=now)


def test_vehicle_runs_one_active_trip_at_a_time(make_trip, owner, now):
    first = make_trip()
    second = make_trip(created_at=now + timedelta(minutes=1))
    lifecycle.start_trip(first, owner, now=now)

    with pytest.raises(ConflictError) as exc:
        lifecycle.start_trip(second, owner, now=now)
    assert "already has an active trip" in exc.value.message
    assert Trip.objects.get(pk=second.pk).status == TripStatus.PLANNED
    assert Trip.objects.filter(vehicle=first.vehicle, status=TripStatus.ACTIVE).count() == 1


def test_start_requires_active_vehicle(make_trip, owner, vehicle, now):
    trip = make_trip()
    Vehicle.objects.filter(pk=vehicle.pk).update(status=VehicleStatus.INACTIVE)
    with pytest.raises(ConflictError):
        lifecycle.start_trip(trip, owner, now=now)


def test_start_requires_vehicle(make_trip, owner, now):
    trip = make_trip(vehicle_id=None)
    with pytest.raises(ConflictError):
        lifecycle.start_trip(trip, owner, now=now)


def test_cannot_start_twice(make_trip, owner, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    with pytest.raises(ConflictError):
        lifecycle.start_trip(trip, owner, now=now)


# --- milestones -------------------------------------------------------------

def test_milestones_record_in_order(make_trip, owner, driver_act, record_milestones, now, sink):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    sink.clear()

    record_milestones(trip, 5)

    numbers = list(trip.milestones.values_list("milestone_number", flat=True))
    assert numbers == [1, 2, 3, 4, 5]
    first = trip.milestones.get(milestone_number=1)
    assert first.backend_meaning == "Empty container picked from CFS / yard"
    assert first.recorded_by_id == driver_act.id

    updates = [p for n, p in sink.for_channel(channel("trip", trip.pk)) if n == TRIP_MILESTONE_UPDATED]
    assert len(updates) == 5
    assert updates[0]["currentMilestone"]["number"] == 2
    assert updates[-1]["milestone"]["milestone_number"] == 5
    assert updates[-1]["currentMilestone"] is None


def test_import_trip_uses_import_meanings(make_trip, owner, record_milestones, now):
    trip = make_trip(trip_type="IMPORT")
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 4)
    assert trip.milestones.get(milestone_number=4).backend_meaning == "Reached empty yard / CFS"


def test_out_of_order_milestone_is_rejected(make_trip, owner, driver_act, record_milestones, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 2)

    with pytest.raises(SequenceError) as exc:
        lifecycle.record_milestone(trip, driver_act, milestone_number=5, latitude=19.1, longitude=72.9, now=now)

    assert exc.value.message == "Invalid milestone sequence. Expected milestone 3, got 5"
    assert exc.value.detail["expected"] == 3
    assert exc.value.detail["received"] == 5
    assert trip.milestones.count() == 2


def test_repeating_a_milestone_is_rejected(make_trip, owner, driver_act, record_milestones, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 1)
    with pytest.raises(SequenceError):
        lifecycle.record_milestone(trip, driver_act, milestone_number=1, latitude=19.1, longitude=72.9, now=now)
    assert isinstance(SequenceError(1, 2), ConflictError)


@pytest.mark.parametrize(
    "lat, lon",
    [(91, 72.9), (-90.5, 72.9), (19.1, 180.01), (19.1, -181), (None, 72.9), ("north", 72.9)],
)
def test_milestone_gps_is_validated(make_trip, owner, driver_act, now, lat, lon):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    with pytest.raises(ValidationError):
        lifecycle.record_milestone(trip, driver_act, milestone_number=1, latitude=lat, longitude=lon, now=now)
    assert trip.milestones.count() == 0


def test_only_assigned_driver_records_milestones(make_trip, owner, other_driver_act, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    for actor in (owner, other_driver_act):
        with pytest.raises(AccessError):
            lifecycle.record_milestone(trip, actor, milestone_number=1, latitude=19.1, longitude=72.9, now=now)


def test_milestones_need_an_active_trip(make_trip, driver_act, now):
    trip = make_trip()
    with pytest.raises(ConflictError):
        lifecycle.record_milestone(trip, driver_act, milestone_number=1, latitude=19.1, longitude=72.9, now=now)


# --- complete ---------------------------------------------------------------

@pytest.mark.parametrize("done", [0, 1, 2, 3, 4])
def test_complete_requires_all_five(make_trip, owner, record_milestones, now, done):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, done)

    with pytest.raises(ConflictError) as exc:
        lifecycle.complete_trip(trip, owner, now=now)

    assert exc.value.detail == {"completedMilestones": done, "requiredMilestones": 5}
    assert Trip.objects.get(pk=trip.pk).status == TripStatus.ACTIVE


def test_export_trip_end_to_end(make_trip, driver_act, record_milestones, now, sink):
    trip = make_trip(trip_type="EXPORT")
    lifecycle.start_trip(trip, driver_act, now=now, events=sink)
    record_milestones(trip, 5)

    trip, next_trip = lifecycle.complete_trip(trip, driver_act, now=now + timedelta(hours=3), events=sink)

    assert trip.status == TripStatus.COMPLETED
    assert trip.completed_at == now + timedelta(hours=3)
    assert trip.milestones.count() == 5
    assert all_milestones_completed(trip)
    assert next_trip is None


# --- cancel -----------------------------------------------------------------

def test_owner_cancels_planned_trip(make_trip, owner, now):
    trip = lifecycle.cancel_trip(make_trip(), owner, reason="customer postponed", now=now)
    assert trip.status == TripStatus.CANCELLED
    assert trip.cancel_reason == "customer postponed"
    assert trip.cancelled_at == now


def test_only_admin_cancels_active_trip(make_trip, owner, admin, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)

    with pytest.raises(ConflictError):
        lifecycle.cancel_trip(trip, owner, now=now)

    trip = lifecycle.cancel_trip(trip, admin, now=now)
    assert trip.status == TripStatus.CANCELLED


def test_completed_trip_cannot_be_cancelled(make_trip, owner, admin, record_milestones, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 5)
    lifecycle.complete_trip(trip, owner, now=now)
    with pytest.raises(ConflictError):
        lifecycle.cancel_trip(trip, admin, now=now)


def test_driver_cannot_cancel(make_trip, driver_act, now):
    with pytest.raises(AccessError):
        lifecycle.cancel_trip(make_trip(), driver_act, now=now)


# --- proof of delivery ------------------------------------------------------

@pytest.fixture
def completed_trip(make_trip, owner, record_milestones, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 5)
    trip, _ = lifecycle.complete_trip(trip, owner, now=now + timedelta(hours=2))
    return trip


def test_pod_cycle(completed_trip, driver_act, owner, now):
    trip = lifecycle.upload_pod(completed_trip, driver_act, photo="pods/trip-1.jpg", now=now)
    assert trip.status == TripStatus.POD_PENDING
    assert trip.pod_uploaded_by_role == "driver"
    assert trip.pod_uploaded_by_id == driver_act.id

    with pytest.raises(AccessError):
        lifecycle.approve_pod(trip, driver_act, now=now)

    trip = lifecycle.approve_pod(trip, owner, now=now + timedelta(minutes=5))
    assert trip.status == TripStatus.COMPLETED
    assert trip.pod_approved_by_id == owner.transporter_id
    assert trip.pod_approved_at == now + timedelta(minutes=5)


def test_pod_needs_completed_trip(make_trip, owner, now):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    with pytest.raises(ConflictError):
        lifecycle.upload_pod(trip, owner, photo="pods/early.jpg", now=now)


def test_pod_approval_needs_pending_pod(completed_trip, owner, now):
    with pytest.raises(ConflictError):
        lifecycle.approve_pod(completed_trip, owner, now=now)


def test_pod_requires_photo(completed_trip, owner, now):
    with pytest.raises(ValidationError):
        lifecycle.upload_pod(completed_trip, owner, photo="", now=now)


# --- share link -------------------------------------------------------------

def test_share_link_defaults_to_a_week(make_trip, owner, now):
    trip = lifecycle.share_trip(make_trip(), owner, now=now)
    assert len(trip.share_token) == 64
    assert trip.share_token_expiry == now + timedelta(hours=168)
    assert lifecycle.get_shared_trip(trip.share_token, now=now + timedelta(days=6)).pk == trip.pk


def test_share_days_take_precedence(make_trip, owner, now):
    trip = lifecycle.share_trip(make_trip(), owner, expiry_hours=2, expiry_days=3, now=now)
    assert trip.share_token_expiry == now + timedelta(days=3)


def test_expired_and_unknown_tokens_look_the_same(make_trip, owner, now):
    trip = lifecycle.share_trip(make_trip(), owner, expiry_hours=1, now=now)

    with pytest.raises(NotFoundError) as expired:
        lifecycle.get_shared_trip(trip.share_token, now=now + timedelta(hours=2))
    with pytest.raises(NotFoundError) as unknown:
        lifecycle.get_shared_trip("0" * 64, now=now)

    assert expired.value.message == unknown.value.message


def test_resharing_rotates_token(make_trip, owner, now):
    trip = make_trip()
    first = lifecycle.share_trip(trip, owner, now=now).share_token
    second = lifecycle.share_trip(trip, owner, now=now).share_token
    assert first != second
    with pytest.raises(NotFoundError):
        lifecycle.get_shared_trip(first, now=now)
