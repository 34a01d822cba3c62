# trips/realtime.py
"""
Inbound messages from a connected driver.

The socket layer authenticates the connection, builds the driver ``Actor`` and
hands each message here. Failures never propagate back into the transport;
they are answered with an ``error`` event on the driver's own channel.
"""
import logging

from core.events import channel, get_event_sink
from core.exceptions import DomainError, NotFoundError, ValidationError
from trips.models import Trip
from trips.services import lifecycle

logger = logging.getLogger(__name__)

ERROR_EVENT = "error"


def _int_field(data, key) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer", received=value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer", received=value)


def _trip(data) -> Trip:
    if not (data or {}).get("tripId"):
        raise ValidationError("tripId is required")
    trip_id = _int_field(data, "tripId")
    trip = Trip.objects.filter(pk=trip_id).first()
    if trip is None:
        raise NotFoundError("Trip not found", trip_id=trip_id)
    return trip


def _start(actor, data, now, events):
    return lifecycle.start_trip(_trip(data), actor, now=now, events=events)


def _milestone(actor, data, now, events):
    return lifecycle.record_milestone(
        _trip(data),
        actor,
        milestone_number=_int_field(data, "milestoneNumber"),
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        photo=data.get("photo") or "",
        now=now,
        events=events,
    )


def _complete(actor, data, now, events):
    return lifecycle.complete_trip(_trip(data), actor, now=now, events=events)


HANDLERS = {
    "trip:start": _start,
    "trip:milestone:update": _milestone,
    "trip:complete": _complete,
}


def dispatch(actor, event: str, data: dict, *, now=None, events=None):
    sink = events or get_event_sink()
    reply_to = channel("driver", actor.id)

    handler = HANDLERS.get(event)
    if handler is None:
        sink.emit(reply_to, ERROR_EVENT, {"message": f"Unknown event: {event}"})
        return None
    if not actor.is_driver:
        sink.emit(reply_to, ERROR_EVENT, {"message": "Only drivers can send trip updates"})
        return None

    try:
        return handler(actor, data or {}, now, sink)
    except DomainError as exc:
        sink.emit(reply_to, ERROR_EVENT, {"message": exc.message, **exc.detail})
    except Exception:
        logger.exception("Realtime %s failed for driver %s", event, actor.id)
        sink.emit(reply_to, ERROR_EVENT, {"message": "Internal error"})
    return None
