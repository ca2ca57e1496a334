"""Minute-level forecast retrieval from a Dark Sky compatible provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from rainalert.config import Settings, settings as default_settings
from rainalert.errors import ForecastUnavailable

logger = logging.getLogger("rainalert.ingestors.forecast")


class ForecastClient:
    """Fetch the raw forecast payload for a coordinate pair."""

    def __init__(
        self,
        *,
        config: Settings | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        units: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = config or default_settings
        self.base_url = (base_url or config.forecast_base_url).rstrip("/")
        self.timeout = timeout or config.forecast_timeout
        self.units = units or config.forecast_units
        self.exclude = list(config.forecast_exclude)
        self._api_key = api_key
        self._config = config
        self.transport = transport

    @property
    def api_key(self) -> str:
        if self._api_key is None:
            self._api_key = self._config.get_forecast_api_key()
        return self._api_key

    def forecast_url(self, lat: float, lng: float) -> str:
        return f"{self.base_url}/{self.api_key}/{lat:f},{lng:f}"

    async def get_forecast(self, lat: float, lng: float) -> dict[str, Any]:
        params = {"units": self.units}
        if self.exclude:
            params["exclude"] = ",".join(self.exclude)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.forecast_url(lat, lng), params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Forecast request timed out: %s", exc)
            raise ForecastUnavailable("Forecast service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Forecast service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise ForecastUnavailable("Forecast service error") from exc
        except httpx.RequestError as exc:
            logger.error("Forecast request failed: %s", exc)
            raise ForecastUnavailable("Forecast request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to parse forecast response: %s", exc)
            raise ForecastUnavailable("Forecast response was not JSON") from exc

        if not isinstance(payload, dict):
            logger.error("Forecast response is not an object: %r", type(payload))
            raise ForecastUnavailable("Forecast response was not an object")

        minutely = payload.get("minutely")
        logger.debug(
            "Forecast fetched for (%s, %s): minutely_samples=%s",
            lat,
            lng,
            len(minutely.get("data") or []) if isinstance(minutely, dict) else None,
        )
        return payload


__all__ = ["ForecastClient"]
