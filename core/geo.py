import math

from core.exceptions import ValidationError

EARTH_RADIUS_KM = 6371


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance between two points, in kilometres."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * \
        math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validate_coordinates(latitude, longitude) -> tuple[float, float]:
    if latitude is None or longitude is None:
        raise ValidationError("GPS location is required (latitude and longitude)")
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        raise ValidationError("Latitude and longitude must be numbers")
    try:
        lat, lon = float(latitude), float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Latitude and longitude must be numbers")
    if not -90 <= lat <= 90:
        raise ValidationError("Latitude must be between -90 and 90", received=lat)
    if not -180 <= lon <= 180:
        raise ValidationError("Longitude must be between -180 and 180", received=lon)
    return lat, lon
