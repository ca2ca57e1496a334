"""Provider adapters for RainAlert."""

from .forecast import ForecastClient
from .geocoding import GeocodingClient

__all__ = ["ForecastClient", "GeocodingClient"]
