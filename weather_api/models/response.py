from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from weather_api.models.forecast import CityForecast


class WeatherResponse(BaseModel):
    """
    Response model for GET /api/weather/all.
    Attributes:
        success (bool): Always true for a 200 response.
        update_time (str | None): CWA dataset description; omitted when CWA sends none.
        data (list[CityForecast]): One entry per CWA location.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    update_time: Optional[str] = Field(default=None, examples=["三十六小時天氣預報"])
    data: list[CityForecast] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Liveness response payload."""

    status: str = "OK"
    timestamp: str = Field(..., examples=["2026-10-18T08:00:00.000Z"])


class EndpointsInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    all_cities: str = "/api/weather/all"
    health: str = "/api/health"


class RootResponse(BaseModel):
    message: str = "歡迎使用 CWA 天氣預報 API"
    endpoints: EndpointsInfo = Field(default_factory=EndpointsInfo)


class ErrorResponse(BaseModel):
    """Standard API error response."""

    error: str
    message: Optional[str] = None
    details: Optional[Any] = None
