from datetime import timedelta

import pytest

from core.exceptions import ConflictError
from trips.models import TripStatus
from trips.services import lifecycle
from trips.services.state import TripAction, milestone_timeline, transition


@pytest.mark.parametrize(
    "current, action, expected",
    [
        (TripStatus.PLANNED, TripAction.START, TripStatus.ACTIVE),
        (TripStatus.ACTIVE, TripAction.COMPLETE, TripStatus.COMPLETED),
        (TripStatus.PLANNED, TripAction.CANCEL, TripStatus.CANCELLED),
        (TripStatus.COMPLETED, TripAction.UPLOAD_POD, TripStatus.POD_PENDING),
        (TripStatus.POD_PENDING, TripAction.APPROVE_POD, TripStatus.COMPLETED),
    ],
)
def test_allowed_transitions(current, action, expected):
    assert transition(current, action) == expected


def test_active_cancel_needs_privilege():
    with pytest.raises(ConflictError):
        transition(TripStatus.ACTIVE, TripAction.CANCEL)
    assert transition(TripStatus.ACTIVE, TripAction.CANCEL, privileged=True) == TripStatus.CANCELLED


@pytest.mark.parametrize(
    "current, action",
    [
        (TripStatus.ACTIVE, TripAction.START),
        (TripStatus.PLANNED, TripAction.COMPLETE),
        (TripStatus.COMPLETED, TripAction.CANCEL),
        (TripStatus.CANCELLED, TripAction.START),
        (TripStatus.ACTIVE, TripAction.UPLOAD_POD),
        (TripStatus.COMPLETED, TripAction.APPROVE_POD),
    ],
)
def test_rejected_transitions(current, action):
    with pytest.raises(ConflictError) as exc:
        transition(current, action, privileged=True)
    assert exc.value.detail["status"] == current


def test_plain_strings_from_the_database_work():
    assert transition("PLANNED", "start") == TripStatus.ACTIVE


def test_milestone_timeline_lists_all_five_steps(make_trip, driver_act, record_milestones, now, sink):
    trip = make_trip(trip_type="EXPORT")
    lifecycle.start_trip(trip, driver_act, now=now, events=sink)
    record_milestones(trip, 2)

    rows = milestone_timeline(trip)

    assert [r["number"] for r in rows] == [1, 2, 3, 4, 5]
    assert [r["completed"] for r in rows] == [True, True, False, False, False]
    assert rows[0]["label"] == "Container Pick up"
    assert rows[0]["meaning"] == "Empty container picked from CFS / yard"
    assert rows[1]["timestamp"] == now + timedelta(minutes=20)
    assert rows[3]["meaning"] is None
    assert rows[3]["planned_meaning"] == "Reached port"
    assert rows[4]["timestamp"] is None
