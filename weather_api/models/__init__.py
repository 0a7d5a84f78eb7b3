from weather_api.models.forecast import CityForecast, ForecastEntry
from weather_api.models.response import (
    ErrorResponse,
    HealthResponse,
    RootResponse,
    WeatherResponse,
)

__all__ = [
    "CityForecast",
    "ForecastEntry",
    "ErrorResponse",
    "HealthResponse",
    "RootResponse",
    "WeatherResponse",
]
