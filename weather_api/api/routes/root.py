"""Service index: lists the public endpoints."""

from __future__ import annotations

from fastapi import Request

from weather_api.core.clients import ForecastUpstream
from weather_api.models.response import RootResponse


async def root_info(request: Request, upstream: ForecastUpstream) -> tuple[int, dict]:
    """Return the endpoint index."""
    return 200, RootResponse().model_dump(by_alias=True)
