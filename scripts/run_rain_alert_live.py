#!/usr/bin/env python
"""
Run this to exercise the live geocoding and forecast providers end to end.

Usage (from repo root, with MAPS_API_KEY and FORECAST_API_KEY set):
    python scripts/run_rain_alert_live.py [location]
"""

import asyncio
import sys

from rainalert.config import settings
from rainalert.ingestors import ForecastClient, GeocodingClient
from rainalert.services import RainAlertService, normalize


async def main(location: str) -> None:
    geocoder = GeocodingClient()
    forecast_client = ForecastClient()

    print(f"=== Live rain alert check for {location!r} (threshold {settings.threshold}) ===\n")

    coordinates = await geocoder.geocode(location)
    print(f"Geocoded to {coordinates.latitude}, {coordinates.longitude}")
    print(f"  town={coordinates.postal_town!r} route={coordinates.route!r}\n")

    forecast = normalize(
        await forecast_client.get_forecast(coordinates.latitude, coordinates.longitude)
    )
    print(f"Current probability: {forecast.current.precipitation_probability}")
    print(f"Minutely summary: {forecast.current.fallback_summary!r}")
    print(f"Received {len(forecast.samples)} minutely samples. Showing a few:")
    for sample in forecast.samples[:5]:
        print(
            f"  {sample.time.isoformat()} p={sample.precipitation_probability:.2f} "
            f"i={sample.precipitation_intensity:.3f} type={sample.precipitation_type}"
        )

    service = RainAlertService(geocoder=geocoder, forecast_client=forecast_client)
    alert = await service.check(coordinates=coordinates)
    print("\nRainAlert:")
    print(alert.model_dump())


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else settings.default_location))
