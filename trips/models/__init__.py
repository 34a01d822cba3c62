# trips/models/__init__.py
from .trip import Trip, TripStatus, TripType
from .milestone import TripMilestone
