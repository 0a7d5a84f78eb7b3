"""
Liveness endpoint.

Should NOT check downstream dependencies: CWA being down does not make this
process unhealthy.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request

from weather_api.core.clients import ForecastUpstream
from weather_api.models.response import HealthResponse


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with milliseconds, e.g. 2026-10-18T08:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def health(request: Request, upstream: ForecastUpstream) -> tuple[int, dict]:
    """Return liveness status."""
    return 200, HealthResponse(timestamp=utc_timestamp()).model_dump()
