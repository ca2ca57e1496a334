"""Adapt raw minute-level forecast payloads to the detection model."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from rainalert.errors import MalformedPayload
from rainalert.models.forecast import (
    CurrentConditions,
    ForecastSample,
    NormalizedForecast,
    PrecipitationType,
)

logger = logging.getLogger("rainalert.services.normalizer")

_KNOWN_TYPES = {member.value: member for member in PrecipitationType}


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    section = payload.get(name)
    if not isinstance(section, dict):
        raise MalformedPayload(f"Forecast payload is missing the '{name}' block")
    return section


def _as_float(value: Any, field: str, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise MalformedPayload(f"Field '{field}' must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedPayload(f"Field '{field}' must be numeric, got {value!r}") from exc


def _parse_type(raw: Any) -> tuple[PrecipitationType | None, str | None]:
    if raw is None:
        return None, None
    text = str(raw).strip().lower()
    if not text:
        return None, None
    return _KNOWN_TYPES.get(text, PrecipitationType.UNKNOWN), text


def _parse_time(index: int, raw_time: Any) -> int:
    if raw_time is None or isinstance(raw_time, bool):
        raise MalformedPayload(f"Minutely sample {index} has no time")
    try:
        value = float(raw_time)
    except (TypeError, ValueError) as exc:
        raise MalformedPayload(f"Minutely sample {index} has an invalid time {raw_time!r}") from exc
    if not value.is_integer():
        raise MalformedPayload(f"Minutely sample {index} time {raw_time!r} is not whole seconds")

    timestamp = int(value)
    try:
        datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedPayload(
            f"Minutely sample {index} time {raw_time!r} is outside the supported range"
        ) from exc
    return timestamp


def _parse_sample(index: int, entry: Any) -> ForecastSample:
    if not isinstance(entry, dict):
        raise MalformedPayload(f"Minutely sample {index} is not an object")

    timestamp = _parse_time(index, entry.get("time"))
    precipitation_type, provider_type = _parse_type(entry.get("precipType"))

    try:
        return ForecastSample(
            timestamp=timestamp,
            precipitation_probability=_as_float(
                entry.get("precipProbability"), "precipProbability"
            ),
            precipitation_intensity=_as_float(entry.get("precipIntensity"), "precipIntensity"),
            precipitation_type=precipitation_type,
            provider_type=provider_type,
        )
    except ValidationError as exc:
        raise MalformedPayload(f"Minutely sample {index} is out of range: {exc}") from exc


def normalize(raw_payload: Any) -> NormalizedForecast:
    """Extract current conditions and the ordered minutely series from a payload.

    Only the fields needed for onset detection are read. An empty minutely
    series is valid and produces no samples. Raises ``MalformedPayload`` when
    the current probability or the minutely data array is structurally absent.
    """

    if not isinstance(raw_payload, dict):
        raise MalformedPayload("Forecast payload must be a JSON object")

    currently = _section(raw_payload, "currently")
    minutely = _section(raw_payload, "minutely")

    if currently.get("precipProbability") is None:
        raise MalformedPayload("Current conditions lack 'precipProbability'")

    data = minutely.get("data")
    if not isinstance(data, list):
        raise MalformedPayload("Minutely block lacks a 'data' array")

    currently_summary = currently.get("summary")
    fallback_summary = minutely.get("summary") or currently_summary or ""

    try:
        current = CurrentConditions(
            precipitation_probability=_as_float(
                currently["precipProbability"], "precipProbability"
            ),
            fallback_summary=str(fallback_summary),
            currently_summary=str(currently_summary) if currently_summary is not None else None,
        )
    except ValidationError as exc:
        raise MalformedPayload(f"Current conditions are out of range: {exc}") from exc

    samples = tuple(_parse_sample(index, entry) for index, entry in enumerate(data))
    logger.debug(
        "Normalized forecast: current_probability=%s samples=%s",
        current.precipitation_probability,
        len(samples),
    )
    return NormalizedForecast(current=current, samples=samples)


def normalize_pair(raw_payload: Any) -> tuple[CurrentConditions, tuple[ForecastSample, ...]]:
    """Return ``normalize`` output as a ``(current, samples)`` pair."""

    forecast = normalize(raw_payload)
    return forecast.current, forecast.samples


__all__ = ["normalize", "normalize_pair"]
