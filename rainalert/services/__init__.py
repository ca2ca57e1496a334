"""Service-layer helpers for the RainAlert service."""

from .detector import DEFAULT_THRESHOLD, OnsetDetector, detect
from .normalizer import normalize, normalize_pair
from .rain_alert import (
    FORECAST_UNAVAILABLE_MESSAGE,
    RainAlertService,
    recent_alert_checks,
    record_alert_check,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "FORECAST_UNAVAILABLE_MESSAGE",
    "OnsetDetector",
    "RainAlertService",
    "detect",
    "normalize",
    "normalize_pair",
    "recent_alert_checks",
    "record_alert_check",
]
