"""
Nationwide weather listing.

GET /api/weather/all -> one CityForecast per CWA location.
"""

from __future__ import annotations

import logging

from fastapi import Request

from weather_api.core.clients import ForecastUpstream
from weather_api.core.exceptions import AppError, error_body
from weather_api.models.response import WeatherResponse
from weather_api.services.forecast_transformer import transform_locations

logger = logging.getLogger(__name__)


async def all_cities_weather(
    request: Request, upstream: ForecastUpstream
) -> tuple[int, dict]:
    """
    Fetch the CWA 36h forecast and reshape it per city.

    Returns:
        (200, WeatherResponse) on success, otherwise the status and error
        body of the AppError raised by the upstream call or the transformer.
    """
    try:
        payload = await upstream.fetch_forecast()
        records = payload.get("records") or {}
        cities = transform_locations(records.get("location"))
    except AppError as exc:
        logger.warning(
            "Weather request failed",
            extra={"error": exc.error, "http_status": exc.http_status},
        )
        return exc.http_status, error_body(exc.to_response())

    logger.info("Weather request served", extra={"cities": len(cities)})
    response = WeatherResponse(
        update_time=records.get("datasetDescription"), data=cities
    )
    return 200, response.model_dump(by_alias=True, exclude_none=True)
