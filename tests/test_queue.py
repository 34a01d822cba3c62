import logging
from datetime import timedelta

import pytest

from core.events import channel
from trips.models import Trip, TripStatus
from trips.services import lifecycle, queue
from trips.services.events import TRIP_AUTO_ACTIVATED, TRIP_COMPLETED


@pytest.fixture
def busy_vehicle(make_trip, owner, now):
    """One active trip followed by two queued ones, oldest first."""
    active = make_trip(created_at=now - timedelta(hours=1))
    lifecycle.start_trip(active, owner, now=now)
    second = make_trip(created_at=now + timedelta(minutes=1))
    third = make_trip(created_at=now + timedelta(minutes=2))
    return active, second, third


def test_queue_status_lists_oldest_first(busy_vehicle, vehicle):
    active, second, third = busy_vehicle
    status = queue.get_vehicle_queue_status(vehicle.pk)

    assert status["has_active_trip"] is True
    assert status["active_trip"].pk == active.pk
    assert status["queued_count"] == 2
    assert [t.pk for t in status["queued_trips"]] == [second.pk, third.pk]


def test_completion_promotes_oldest_planned_trip(busy_vehicle, owner, record_milestones, now, sink, driver, transporter):
    active, second, third = busy_vehicle
    record_milestones(active, 5)
    sink.clear()

    done, promoted = lifecycle.complete_trip(active, owner, now=now + timedelta(hours=4), events=sink)

    assert done.status == TripStatus.COMPLETED
    assert promoted.pk == second.pk
    assert Trip.objects.get(pk=second.pk).status == TripStatus.ACTIVE
    assert Trip.objects.get(pk=second.pk).started_at == now + timedelta(hours=4)
    assert Trip.objects.get(pk=third.pk).status == TripStatus.PLANNED

    assert sink.names().index(TRIP_COMPLETED) < sink.names().index(TRIP_AUTO_ACTIVATED)
    driver_events = dict(sink.for_channel(channel("driver", driver.pk)))
    assert TRIP_COMPLETED not in driver_events
    assert driver_events[TRIP_AUTO_ACTIVATED]["message"] == "Next trip has been auto-activated"
    assert driver_events[TRIP_AUTO_ACTIVATED]["trip"]["id"] == second.pk
    transporter_events = [n for n, _ in sink.for_channel(channel("transporter", transporter.pk))]
    assert transporter_events == [TRIP_COMPLETED, TRIP_AUTO_ACTIVATED]


def test_completed_event_audience(make_trip, owner, record_milestones, now, sink, vehicle):
    trip = make_trip()
    lifecycle.start_trip(trip, owner, now=now)
    record_milestones(trip, 5)
    sink.clear()

    lifecycle.complete_trip(trip, owner, now=now, events=sink)

    keys = sorted(key for key, name, _ in sink.events if name == TRIP_COMPLETED)
    assert keys == sorted([
        channel("transporter", trip.transporter_id),
        channel("vehicle", vehicle.pk),
        channel("trip", trip.pk),
    ])
    assert TRIP_AUTO_ACTIVATED not in sink.names()


def test_activate_next_trip_with_empty_queue(vehicle):
    assert queue.activate_next_trip(vehicle.pk) is None
    assert queue.activate_next_trip(None) is None


def test_activate_next_trip_skips_busy_vehicle(busy_vehicle, vehicle, caplog):
    _, second, _ = busy_vehicle
    with caplog.at_level(logging.WARNING, logger="trips.services.queue"):
        assert queue.activate_next_trip(vehicle.pk) is None
    assert "auto-activation skipped" in caplog.text
    assert Trip.objects.get(pk=second.pk).status == TripStatus.PLANNED


def test_activate_next_trip_picks_earliest_created(make_trip, vehicle, now):
    later = make_trip(created_at=now + timedelta(minutes=30))
    earlier = make_trip(created_at=now)
    trip = queue.activate_next_trip(vehicle.pk, now=now)
    assert trip.pk == earlier.pk
    assert Trip.objects.get(pk=later.pk).status == TripStatus.PLANNED


def test_auto_activation_failure_does_not_undo_completion(busy_vehicle, owner, record_milestones, now, sink, monkeypatch, caplog):
    active, second, _ = busy_vehicle
    record_milestones(active, 5)

    def boom(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(queue, "activate_next_trip", boom)
    with caplog.at_level(logging.ERROR, logger="trips.services.queue"):
        done, promoted = lifecycle.complete_trip(active, owner, now=now, events=sink)

    assert promoted is None
    assert Trip.objects.get(pk=done.pk).status == TripStatus.COMPLETED
    assert Trip.objects.get(pk=second.pk).status == TripStatus.PLANNED
    assert "Auto-activation failed" in caplog.text
    assert TRIP_AUTO_ACTIVATED not in sink.names()
