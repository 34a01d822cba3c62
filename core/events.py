# core/events.py
import json
import logging
from functools import lru_cache

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

CHANNEL_KINDS = ("transporter", "driver", "vehicle", "trip")


def channel(kind: str, ident) -> str:
    if kind not in CHANNEL_KINDS:
        raise ValueError(f"Unknown channel kind: {kind}")
    return f"{kind}:{ident}"


class EventSink:
    """
    Receives ``(channel, event, payload)`` triples.
    The realtime transport (socket server, push gateway) subscribes behind a sink.
    """

    def emit(self, channel_key: str, event: str, payload: dict) -> None:
        raise NotImplementedError


class LoggingEventSink(EventSink):
    def emit(self, channel_key, event, payload):
        logger.info("event %s -> %s %s", event, channel_key, json.dumps(payload, cls=DjangoJSONEncoder))


class InMemoryEventSink(EventSink):
    def __init__(self):
        self.events = []

    def emit(self, channel_key, event, payload):
        self.events.append((channel_key, event, payload))

    def clear(self):
        self.events.clear()

    def names(self):
        return [name for _, name, _ in self.events]

    def for_channel(self, channel_key):
        return [(name, payload) for key, name, payload in self.events if key == channel_key]


@lru_cache
def get_event_sink() -> EventSink:
    return import_string(settings.EVENT_SINK)()
