"""Normalized forecast models used by onset detection."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PrecipitationType(str, Enum):
    """Precipitation categories reported by the forecast provider."""

    NONE = "none"
    RAIN = "rain"
    SNOW = "snow"
    SLEET = "sleet"
    UNKNOWN = "unknown"


class ForecastSample(BaseModel):
    """One minute-level forecast data point."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Sample time in seconds since epoch (UTC)")
    precipitation_probability: float = Field(
        ..., ge=0.0, le=1.0, description="Probability of precipitation, 0-1",
    )
    precipitation_intensity: float = Field(
        default=0.0, ge=0.0, description="Precipitation intensity in provider units",
    )
    precipitation_type: Optional[PrecipitationType] = Field(
        default=None, description="Precipitation category, if classified",
    )
    provider_type: Optional[str] = Field(
        default=None, description="Precipitation type text as reported by the provider",
    )

    @field_validator("timestamp")
    @classmethod
    def _representable_timestamp(cls, value: int) -> int:
        try:
            datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"timestamp {value} is outside the supported range") from exc
        return value

    @property
    def time(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def type_name(self) -> str | None:
        """Provider type text, falling back to the classified category."""
        if self.provider_type:
            return self.provider_type
        return self.precipitation_type.value if self.precipitation_type else None


class CurrentConditions(BaseModel):
    """Snapshot of conditions at the anchor time."""

    model_config = ConfigDict(frozen=True)

    precipitation_probability: float = Field(
        ..., ge=0.0, le=1.0, description="Current probability of precipitation, 0-1",
    )
    fallback_summary: str = Field(
        default="", description="Provider summary used when no onset is detected",
    )
    currently_summary: Optional[str] = Field(
        default=None, description="Provider description of current conditions",
    )


class NormalizedForecast(BaseModel):
    """Current conditions plus the ordered minute-level series."""

    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    samples: tuple[ForecastSample, ...] = Field(default_factory=tuple)

    @property
    def anchor(self) -> ForecastSample | None:
        """First sample of the series, standing in for the current minute."""
        return self.samples[0] if self.samples else None


__all__ = ["CurrentConditions", "ForecastSample", "NormalizedForecast", "PrecipitationType"]
