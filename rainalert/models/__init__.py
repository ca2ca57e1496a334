"""Pydantic models for the RainAlert service."""

from .alert import AlertCheckRecord, AlertMessage, Coordinates, RainAlert
from .forecast import CurrentConditions, ForecastSample, NormalizedForecast, PrecipitationType
from .onset import NoOnset, OnsetFound, OnsetResult

__all__ = [
    "AlertCheckRecord",
    "AlertMessage",
    "Coordinates",
    "CurrentConditions",
    "ForecastSample",
    "NoOnset",
    "NormalizedForecast",
    "OnsetFound",
    "OnsetResult",
    "PrecipitationType",
    "RainAlert",
]
