"""Domain errors raised by RainAlert components."""

from __future__ import annotations


class RainAlertError(Exception):
    """Base class for RainAlert failures."""


class MalformedPayload(RainAlertError):
    """Raised when a raw forecast payload lacks required fields."""


class InvalidSampleOrder(RainAlertError):
    """Raised when forecast samples are not ordered by timestamp."""

    def __init__(self, index: int, previous: int, current: int):
        super().__init__(
            f"Sample {index} at {current} precedes previous sample at {previous}"
        )
        self.index = index
        self.previous = previous
        self.current = current


class GeocodingError(RainAlertError):
    """Raised when the geocoding provider cannot be used."""


class LocationNotFound(GeocodingError):
    """Raised when a location string does not resolve to coordinates."""

    def __init__(self, location: str):
        super().__init__(f"Location not found: {location}")
        self.location = location


class ForecastUnavailable(RainAlertError):
    """Raised when the forecast provider cannot return a usable payload."""


__all__ = [
    "ForecastUnavailable",
    "GeocodingError",
    "InvalidSampleOrder",
    "LocationNotFound",
    "MalformedPayload",
    "RainAlertError",
]
