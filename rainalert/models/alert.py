"""Rain alert request and response models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from rainalert.models.onset import OnsetResult


class Coordinates(BaseModel):
    """Geocoded position for a location string."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    formatted_address: Optional[str] = Field(
        default=None, description="Provider-formatted address of the match",
    )
    postal_town: Optional[str] = Field(default=None, description="Postal town, if reported")
    route: Optional[str] = Field(default=None, description="Street or route, if reported")


class RainAlert(BaseModel):
    """Outcome of a single rain alert check."""

    location: Optional[str] = Field(
        default=None, description="Location string that was checked, if any",
    )
    latitude: float = Field(..., description="Latitude used for the forecast")
    longitude: float = Field(..., description="Longitude used for the forecast")
    status: Literal["onset", "clear", "unavailable"] = Field(
        ..., description="Whether an onset was found or the forecast could not be used",
    )
    result: Optional[OnsetResult] = Field(
        default=None, description="Detection result; absent when the forecast was unavailable",
    )
    message: str = Field(..., description="Human-readable summary")
    checked_at: datetime = Field(
        default_factory=datetime.utcnow, description="Time the check ran (UTC)",
    )


class AlertMessage(BaseModel):
    """Response body carrying a single alert message."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., alias="Message", description="Alert or summary text")


class AlertCheckRecord(BaseModel):
    """Recorded alert check returned by the history endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    location: Optional[str] = None
    latitude: float
    longitude: float
    status: str
    kind: Optional[str] = None
    lead_minutes: Optional[float] = None
    message: str
    created_at: datetime


__all__ = ["AlertCheckRecord", "AlertMessage", "Coordinates", "RainAlert"]
