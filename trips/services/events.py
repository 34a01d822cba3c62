# trips/services/events.py
"""
Trip event contract: which channels hear about which transition.

    trip:created            -> transporter
    trip:started            -> transporter, driver, vehicle, trip
    trip:milestone:updated  -> transporter, driver, vehicle, trip
    trip:completed          -> transporter, vehicle, trip
    trip:auto-activated     -> successor's driver, transporter
"""
from core.events import channel, get_event_sink

TRIP_CREATED = "trip:created"
TRIP_STARTED = "trip:started"
TRIP_MILESTONE_UPDATED = "trip:milestone:updated"
TRIP_COMPLETED = "trip:completed"
TRIP_AUTO_ACTIVATED = "trip:auto-activated"


def trip_payload(trip) -> dict:
    from trips.serializers import TripSerializer

    return dict(TripSerializer(trip).data)


def _fanout(sink, channels, event, payload):
    sink = sink or get_event_sink()
    for key in channels:
        sink.emit(key, event, payload)


def _trip_channels(trip, *, driver=True):
    keys = [channel("transporter", trip.transporter_id)]
    if driver and trip.driver_id:
        keys.append(channel("driver", trip.driver_id))
    if trip.vehicle_id:
        keys.append(channel("vehicle", trip.vehicle_id))
    keys.append(channel("trip", trip.pk))
    return keys


def _current(trip):
    from trips.services.state import current_milestone

    cm = current_milestone(trip)
    return cm.as_dict() if cm else None


def trip_created(trip, *, events=None):
    _fanout(events, [channel("transporter", trip.transporter_id)], TRIP_CREATED, {"trip": trip_payload(trip)})


def trip_started(trip, *, events=None):
    payload = {"trip": trip_payload(trip), "currentMilestone": _current(trip)}
    _fanout(events, _trip_channels(trip), TRIP_STARTED, payload)


def milestone_updated(trip, milestone, *, events=None):
    from trips.serializers import TripMilestoneSerializer

    payload = {
        "trip": trip_payload(trip),
        "milestone": dict(TripMilestoneSerializer(milestone).data),
        "currentMilestone": _current(trip),
    }
    _fanout(events, _trip_channels(trip), TRIP_MILESTONE_UPDATED, payload)


def trip_completed(trip, *, events=None):
    _fanout(events, _trip_channels(trip, driver=False), TRIP_COMPLETED, {"trip": trip_payload(trip)})


def trip_auto_activated(trip, *, events=None):
    payload = {"trip": trip_payload(trip)}
    if trip.driver_id:
        driver_payload = {**payload, "message": "Next trip has been auto-activated"}
        _fanout(events, [channel("driver", trip.driver_id)], TRIP_AUTO_ACTIVATED, driver_payload)
    _fanout(events, [channel("transporter", trip.transporter_id)], TRIP_AUTO_ACTIVATED, payload)
