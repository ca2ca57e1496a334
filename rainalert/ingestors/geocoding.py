"""Resolve location strings to coordinates using the Google Geocoding API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from rainalert.config import Settings, settings as default_settings
from rainalert.errors import GeocodingError, LocationNotFound
from rainalert.models.alert import Coordinates

logger = logging.getLogger("rainalert.ingestors.geocoding")


def _component(components: list[dict[str, Any]], component_type: str) -> str | None:
    for component in components:
        types = component.get("types") or []
        if types and types[0] == component_type:
            return component.get("long_name")
    return None


class GeocodingClient:
    """Look up coordinates for a free-text location or postcode."""

    def __init__(
        self,
        *,
        config: Settings | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = config or default_settings
        self.base_url = base_url or config.geocoding_base_url
        self.timeout = timeout or config.geocoding_timeout
        self._api_key = api_key
        self._config = config
        self.transport = transport

    @property
    def api_key(self) -> str:
        if self._api_key is None:
            self._api_key = self._config.get_maps_api_key()
        return self._api_key

    async def geocode(self, location: str) -> Coordinates:
        if not location or not location.strip():
            raise LocationNotFound(location)

        params = {"address": location.strip(), "key": self.api_key}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Geocoding request timed out: %s", exc)
            raise GeocodingError("Geocoding service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Geocoding service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise GeocodingError("Geocoding service error") from exc
        except httpx.RequestError as exc:
            logger.error("Geocoding request failed: %s", exc)
            raise GeocodingError("Geocoding request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to parse geocoding response: %s", exc)
            raise GeocodingError("Geocoding response was not JSON") from exc

        status = payload.get("status") if isinstance(payload, dict) else None
        results = (payload.get("results") if isinstance(payload, dict) else None) or []

        if status == "ZERO_RESULTS" or (status == "OK" and not results):
            logger.info("No geocoding match for %r", location)
            raise LocationNotFound(location)
        if status != "OK":
            logger.error(
                "Geocoding provider rejected request: status=%s message=%s",
                status,
                payload.get("error_message") if isinstance(payload, dict) else None,
            )
            raise GeocodingError(f"Geocoding provider status {status}")

        first = results[0]
        try:
            position = first["geometry"]["location"]
            components = first.get("address_components") or []
            coordinates = Coordinates(
                latitude=float(position["lat"]),
                longitude=float(position["lng"]),
                formatted_address=first.get("formatted_address"),
                postal_town=_component(components, "postal_town"),
                route=_component(components, "route"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Geocoding result lacks a usable location: %s", exc)
            raise GeocodingError("Geocoding result malformed") from exc

        logger.debug(
            "Geocoded %r to (%s, %s) town=%s route=%s",
            location,
            coordinates.latitude,
            coordinates.longitude,
            coordinates.postal_town,
            coordinates.route,
        )
        return coordinates


__all__ = ["GeocodingClient"]
