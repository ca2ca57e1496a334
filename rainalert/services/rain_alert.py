"""Compose geocoding, forecast retrieval and onset detection into one check."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rainalert import db_models
from rainalert.config import Settings, settings as default_settings
from rainalert.db import maybe_cleanup_old_records
from rainalert.errors import ForecastUnavailable, MalformedPayload
from rainalert.ingestors import ForecastClient, GeocodingClient
from rainalert.models.alert import Coordinates, RainAlert
from rainalert.models.onset import OnsetFound
from rainalert.services.detector import OnsetDetector
from rainalert.services.normalizer import normalize

logger = logging.getLogger("rainalert.services.rain_alert")

FORECAST_UNAVAILABLE_MESSAGE = "Forecast unavailable"
NO_SUMMARY_MESSAGE = "No precipitation expected"


class RainAlertService:
    """Run a rain onset check for a location or coordinate pair."""

    def __init__(
        self,
        geocoder: Optional[GeocodingClient] = None,
        forecast_client: Optional[ForecastClient] = None,
        *,
        config: Settings | None = None,
    ) -> None:
        self.config = config or default_settings
        self.geocoder = geocoder or GeocodingClient(config=self.config)
        self.forecast_client = forecast_client or ForecastClient(config=self.config)

    def _detector(self, threshold: float | None) -> OnsetDetector:
        return OnsetDetector(
            self.config.threshold if threshold is None else threshold,
            generic_label=self.config.generic_label,
        )

    async def check(
        self,
        location: str | None = None,
        coordinates: Coordinates | None = None,
        threshold: float | None = None,
    ) -> RainAlert:
        detector = self._detector(threshold)

        if coordinates is None:
            location = location or self.config.default_location
            coordinates = await self.geocoder.geocode(location)

        try:
            payload = await self.forecast_client.get_forecast(
                coordinates.latitude, coordinates.longitude
            )
            forecast = normalize(payload)
        except (ForecastUnavailable, MalformedPayload) as exc:
            logger.warning(
                "Forecast unavailable for (%s, %s): %s",
                coordinates.latitude,
                coordinates.longitude,
                exc,
            )
            return RainAlert(
                location=location,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                status="unavailable",
                message=FORECAST_UNAVAILABLE_MESSAGE,
            )

        result = detector.detect(forecast.current, forecast.samples)
        alert = RainAlert(
            location=location,
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
            status="onset" if isinstance(result, OnsetFound) else "clear",
            result=result,
            message=result.text or NO_SUMMARY_MESSAGE,
        )
        logger.info(
            "Rain alert checked: location=%s status=%s message=%r",
            location,
            alert.status,
            alert.message,
        )
        return alert


def record_alert_check(db: Session, alert: RainAlert) -> None:
    """Store the alert check for history; failures are logged, not raised."""

    lead_minutes = alert.result.lead_minutes if isinstance(alert.result, OnsetFound) else None
    record = db_models.AlertCheck(
        location=alert.location,
        latitude=alert.latitude,
        longitude=alert.longitude,
        status=alert.status,
        kind=alert.result.kind if alert.result is not None else None,
        lead_minutes=lead_minutes,
        message=alert.message,
        created_at=alert.checked_at or datetime.utcnow(),
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to record alert check: %s", exc)
        return
    maybe_cleanup_old_records(db)


def recent_alert_checks(db: Session, limit: int = 20) -> list[db_models.AlertCheck]:
    return (
        db.query(db_models.AlertCheck)
        .order_by(db_models.AlertCheck.created_at.desc(), db_models.AlertCheck.id.desc())
        .limit(limit)
        .all()
    )


__all__ = [
    "FORECAST_UNAVAILABLE_MESSAGE",
    "NO_SUMMARY_MESSAGE",
    "RainAlertService",
    "recent_alert_checks",
    "record_alert_check",
]
