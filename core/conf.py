from django.conf import settings

DEFAULTS = {
    "QR_TTL_SECONDS": 60 * 60,
    "SHARE_LINK_DEFAULT_HOURS": 168,
    "FRAUD_GPS_THRESHOLD_KM": 5,
    "FRAUD_EXPRESS_WINDOW_MINUTES": 10,
    "FRAUD_EXPRESS_THRESHOLD": 3,
    "FRAUD_PATTERN_LOOKBACK_DAYS": 30,
    "FRAUD_PATTERN_SAMPLE_SIZE": 10,
    "FRAUD_PATTERN_MIN_SAMPLES": 3,
    "FRAUD_PATTERN_Z_THRESHOLD": 2.0,
}


def fleet_setting(name: str):
    """Read a FLEET tunable, falling back to the built-in default."""
    return getattr(settings, "FLEET", {}).get(name, DEFAULTS[name])
