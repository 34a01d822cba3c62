# trips/services/state.py
"""
Trip status machine.

    PLANNED -> ACTIVE -> COMPLETED <-> POD_PENDING
    PLANNED -> CANCELLED
    ACTIVE  -> CANCELLED   (admin only)
"""
from core.exceptions import ConflictError
from trips.milestones import TOTAL_MILESTONES, MilestoneType, backend_meaning, driver_label, next_milestone
from trips.models import TripStatus


class TripAction:
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    UPLOAD_POD = "upload_pod"
    APPROVE_POD = "approve_pod"


TRANSITIONS = {
    (TripStatus.PLANNED, TripAction.START): TripStatus.ACTIVE,
    (TripStatus.ACTIVE, TripAction.COMPLETE): TripStatus.COMPLETED,
    (TripStatus.PLANNED, TripAction.CANCEL): TripStatus.CANCELLED,
    (TripStatus.ACTIVE, TripAction.CANCEL): TripStatus.CANCELLED,
    (TripStatus.COMPLETED, TripAction.UPLOAD_POD): TripStatus.POD_PENDING,
    (TripStatus.POD_PENDING, TripAction.APPROVE_POD): TripStatus.COMPLETED,
}

PRIVILEGED = {
    (TripStatus.ACTIVE, TripAction.CANCEL),
}


def transition(current: str, action: str, *, privileged: bool = False) -> str:
    """Return the status reached by ``action`` from ``current`` or raise ConflictError."""
    target = TRANSITIONS.get((current, action))
    if target is None or ((current, action) in PRIVILEGED and not privileged):
        allowed = sorted(str(s) for (s, a) in TRANSITIONS if a == action and (privileged or (s, a) not in PRIVILEGED))
        raise ConflictError(
            f"Cannot {action.replace('_', ' ')} a trip in status {current}",
            status=str(current),
            allowed_from=allowed,
        )
    return target


def completed_milestone_count(trip) -> int:
    return trip.milestones.count()


def all_milestones_completed(trip) -> bool:
    return completed_milestone_count(trip) == TOTAL_MILESTONES


def current_milestone(trip):
    return next_milestone(completed_milestone_count(trip))


def milestone_timeline(trip) -> list[dict]:
    """All five steps in order, completed ones carrying their recorded data."""
    done = {m.milestone_number: m for m in trip.milestones.all()}
    rows = []
    for number, mtype in enumerate(MilestoneType.ORDER, start=1):
        m = done.get(number)
        rows.append({
            "number": number,
            "type": mtype,
            "label": driver_label(mtype),
            "completed": m is not None,
            "meaning": m.backend_meaning if m else None,
            "planned_meaning": backend_meaning(mtype, trip.trip_type),
            "timestamp": m.timestamp if m else None,
            "latitude": m.latitude if m else None,
            "longitude": m.longitude if m else None,
            "photo": (m.photo or None) if m else None,
        })
    return rows
