"""Configuration settings for the RainAlert service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("rainalert.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def _ssm_client():
    return boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )


@lru_cache(maxsize=8)
def get_ssm_secret(parameter_name: str) -> str:
    """Fetch a decrypted secret from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the value results in a runtime error so callers fail fast.
    """

    try:
        response = _ssm_client().get_parameter(Name=parameter_name, WithDecryption=True)
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:
        logger.error("Failed to load %s from SSM: %s", parameter_name, exc)
        raise RuntimeError(f"Unable to load {parameter_name} from SSM") from exc

    if not value:
        logger.error("Received empty value for %s from SSM", parameter_name)
        raise RuntimeError(f"{parameter_name} not configured in SSM")

    return value


def resolve_api_key(value: str, parameter_name: str | None) -> str:
    """Return a configured API key, falling back to SSM when only a parameter is named."""

    if value:
        return value
    if parameter_name:
        return get_ssm_secret(parameter_name)
    return ""


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    rainalert_env: str = os.getenv("RAINALERT_ENV", "local")
    log_level: str = os.getenv("RAINALERT_LOG_LEVEL", "INFO")
    retention_days: int = int(os.getenv("RAINALERT_RETENTION_DAYS", "7"))
    record_checks: bool = _get_bool("RAINALERT_RECORD_CHECKS", default=True)

    # Detection policy
    default_location: str = os.getenv("RAINALERT_LOCATION", "rg248jz")
    threshold: float = float(os.getenv("RAINALERT_THRESHOLD", "0.2"))
    generic_label: str = os.getenv("RAINALERT_GENERIC_LABEL", "Precipitation")

    # Geocoding (Google Maps compatible)
    geocoding_base_url: str = os.getenv(
        "GEOCODING_BASE_URL", "https://maps.googleapis.com/maps/api/geocode/json"
    )
    geocoding_timeout: float = float(os.getenv("GEOCODING_TIMEOUT", "10.0"))
    maps_api_key: str = os.getenv("MAPS_API_KEY", "")
    maps_api_key_param: str | None = os.getenv("MAPS_API_KEY_PARAM")

    # Minute-level forecast (Dark Sky compatible)
    forecast_base_url: str = os.getenv("FORECAST_BASE_URL", "https://api.darksky.net/forecast")
    forecast_timeout: float = float(os.getenv("FORECAST_TIMEOUT", "10.0"))
    forecast_units: str = os.getenv("FORECAST_UNITS", "si")
    forecast_exclude: list[str] = field(
        default_factory=lambda: ["hourly", "daily", "alerts", "flags"]
    )
    forecast_api_key: str = os.getenv("FORECAST_API_KEY", "")
    forecast_api_key_param: str | None = os.getenv("FORECAST_API_KEY_PARAM")

    def get_maps_api_key(self) -> str:
        return resolve_api_key(self.maps_api_key, self.maps_api_key_param)

    def get_forecast_api_key(self) -> str:
        return resolve_api_key(self.forecast_api_key, self.forecast_api_key_param)


settings = Settings()

__all__ = ["settings", "Settings", "get_ssm_secret", "resolve_api_key"]
