"""Rain alert endpoints."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from rainalert.config import settings
from rainalert.db import get_db
from rainalert.errors import GeocodingError, InvalidSampleOrder, LocationNotFound, MalformedPayload
from rainalert.models.alert import AlertCheckRecord, AlertMessage, Coordinates, RainAlert
from rainalert.models.onset import NoOnset, OnsetFound
from rainalert.services import (
    OnsetDetector,
    RainAlertService,
    normalize,
    recent_alert_checks,
    record_alert_check,
)

router = APIRouter(prefix="/api/v1", tags=["rain-alert"])

logger = logging.getLogger("rainalert.api.alerts")

FUNC_REPLY_HEADER = "X-RainAlert-Func-Reply"
FUNC_REPLY_VALUE = "rainalert-handler"


def get_rain_alert_service() -> RainAlertService:
    return RainAlertService()


def _coordinates(lat: float | None, lng: float | None) -> Coordinates | None:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="lat and lng must be provided together",
        )
    return Coordinates(latitude=lat, longitude=lng)


async def _run_check(
    service: RainAlertService,
    db: Session,
    location: str | None,
    lat: float | None,
    lng: float | None,
    threshold: float | None,
) -> RainAlert:
    try:
        alert = await service.check(
            location=location, coordinates=_coordinates(lat, lng), threshold=threshold
        )
    except LocationNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except InvalidSampleOrder as exc:
        logger.error("Forecast samples out of order: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Forecast samples were not ordered by time",
        ) from exc

    if settings.record_checks:
        record_alert_check(db, alert)
    return alert


@router.get(
    "/rain-alert",
    response_model=AlertMessage,
    summary="Get the rain onset message for a location",
)
async def get_rain_alert(
    response: Response,
    location: Optional[str] = Query(default=None, description="Location or postcode to check"),
    lat: Optional[float] = Query(default=None, ge=-90, le=90, description="Latitude"),
    lng: Optional[float] = Query(default=None, ge=-180, le=180, description="Longitude"),
    threshold: Optional[float] = Query(
        default=None, ge=0, le=1, description="Alert probability threshold"
    ),
    service: RainAlertService = Depends(get_rain_alert_service),
    db: Session = Depends(get_db),
) -> AlertMessage:
    """Return a single message saying whether precipitation is about to start."""

    alert = await _run_check(service, db, location, lat, lng, threshold)
    response.headers[FUNC_REPLY_HEADER] = FUNC_REPLY_VALUE
    return AlertMessage(message=alert.message)


@router.get(
    "/rain-alert/detail",
    response_model=RainAlert,
    summary="Get the full rain onset result for a location",
)
async def get_rain_alert_detail(
    location: Optional[str] = Query(default=None, description="Location or postcode to check"),
    lat: Optional[float] = Query(default=None, ge=-90, le=90, description="Latitude"),
    lng: Optional[float] = Query(default=None, ge=-180, le=180, description="Longitude"),
    threshold: Optional[float] = Query(
        default=None, ge=0, le=1, description="Alert probability threshold"
    ),
    service: RainAlertService = Depends(get_rain_alert_service),
    db: Session = Depends(get_db),
) -> RainAlert:
    return await _run_check(service, db, location, lat, lng, threshold)


@router.get(
    "/rain-alert/history",
    response_model=list[AlertCheckRecord],
    summary="List recently recorded rain alert checks",
)
def get_rain_alert_history(
    limit: int = Query(default=20, ge=1, le=500, description="Maximum records to return"),
    db: Session = Depends(get_db),
) -> list[AlertCheckRecord]:
    return [AlertCheckRecord.model_validate(row) for row in recent_alert_checks(db, limit)]


@router.post(
    "/rain-alert/detect",
    response_model=Union[NoOnset, OnsetFound],
    summary="Run onset detection on a raw forecast payload",
)
def detect_from_payload(
    payload: dict[str, Any] = Body(..., description="Raw minute-level forecast payload"),
    threshold: Optional[float] = Query(
        default=None, ge=0, le=1, description="Alert probability threshold"
    ),
) -> Union[NoOnset, OnsetFound]:
    """Normalize a posted forecast payload and detect the first onset, without network calls."""

    detector = OnsetDetector(
        settings.threshold if threshold is None else threshold,
        generic_label=settings.generic_label,
    )
    try:
        forecast = normalize(payload)
        return detector.detect(forecast.current, forecast.samples)
    except (MalformedPayload, InvalidSampleOrder) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
