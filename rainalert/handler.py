"""Serverless entry point returning an API Gateway proxy response."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from rainalert.api.alerts import FUNC_REPLY_HEADER, FUNC_REPLY_VALUE
from rainalert.config import settings
from rainalert.errors import GeocodingError, InvalidSampleOrder, LocationNotFound
from rainalert.services import RainAlertService

logger = logging.getLogger("rainalert.handler")


def build_response(message: str, status_code: int = 200) -> dict[str, Any]:
    """Wrap a message in the proxy response envelope."""

    return {
        "statusCode": status_code,
        "isBase64Encoded": False,
        "headers": {
            "Content-Type": "application/json",
            FUNC_REPLY_HEADER: FUNC_REPLY_VALUE,
        },
        "body": json.dumps({"Message": message}),
    }


def _event_location(event: Any) -> str | None:
    # Scheduled triggers carry no body; a proxy request may pass ?location=.
    if not isinstance(event, dict):
        return None
    params = event.get("queryStringParameters") or {}
    return params.get("location") if isinstance(params, dict) else None


async def run(event: Any = None, service: RainAlertService | None = None) -> dict[str, Any]:
    service = service or RainAlertService()
    location = _event_location(event) or settings.default_location

    try:
        alert = await service.check(location=location)
    except LocationNotFound as exc:
        logger.warning("Location lookup failed: %s", exc)
        return build_response(str(exc), status_code=404)
    except (GeocodingError, InvalidSampleOrder) as exc:
        logger.error("Rain alert check failed: %s", exc)
        return build_response(str(exc), status_code=502)

    return build_response(alert.message)


def handler(event: Any = None, context: Any = None) -> dict[str, Any]:
    """Lambda handler; ``context`` is accepted for the runtime and unused."""

    return asyncio.run(run(event))


__all__ = ["build_response", "handler", "run"]
