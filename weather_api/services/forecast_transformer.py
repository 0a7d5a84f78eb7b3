"""
Reshape CWA F-C0032-001 records into per-city forecasts.

CWA publishes one `weatherElement` list per location, each element carrying
its own `time` list. All elements of a location share the same time windows
by position, so window `i` of the output collects `time[i]` of every element.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from weather_api.core.exceptions import ForecastDataError, NoForecastDataError
from weather_api.models.forecast import CityForecast, ForecastEntry

logger = logging.getLogger(__name__)

Location = Mapping[str, Any]


def _verbatim(value: str) -> str:
    return str(value)


def _percent(value: str) -> str:
    return f"{value}%"


def _celsius(value: str) -> str:
    return f"{value}°C"


# elementName -> (ForecastEntry field, formatter). Other tags are ignored so
# new CWA elements do not break the endpoint.
ELEMENT_FIELDS: dict[str, tuple[str, Callable[[str], str]]] = {
    "Wx": ("weather", _verbatim),
    "PoP": ("rain", _percent),
    "MinT": ("min_temp", _celsius),
    "T": ("min_temp", _celsius),
    "MaxT": ("max_temp", _celsius),
    "CI": ("comfort", _verbatim),
    "WS": ("wind_speed", _verbatim),
}


def _check_time_windows(city: str, elements: Sequence[Location]) -> int:
    if not elements:
        raise ForecastDataError(f"{city}: no weather elements")

    time_count = len(elements[0]["time"])
    for element in elements[1:]:
        count = len(element["time"])
        if count != time_count:
            raise ForecastDataError(
                f"{city}: element {element.get('elementName')} has {count} "
                f"time windows, expected {time_count}"
            )
    return time_count


def transform_location(location: Location) -> CityForecast:
    """Build the forecast windows of one CWA location."""
    city = location["locationName"]
    elements: Sequence[Location] = location.get("weatherElement") or []
    # unknown tags may follow their own cadence; only known ones must agree
    known = [e for e in elements if e.get("elementName") in ELEMENT_FIELDS]
    windowed = known or list(elements[:1])
    time_count = _check_time_windows(city, windowed)

    forecasts: list[ForecastEntry] = []
    for i in range(time_count):
        window = windowed[0]["time"][i]
        values: dict[str, str] = {}
        for element in known:
            field, fmt = ELEMENT_FIELDS[element["elementName"]]
            values[field] = fmt(element["time"][i]["parameter"]["parameterName"])

        forecasts.append(
            ForecastEntry(
                start_time=window["startTime"], end_time=window["endTime"], **values
            )
        )

    return CityForecast(city=city, forecasts=forecasts)


def transform_locations(
    locations: Optional[Sequence[Location]],
) -> list[CityForecast]:
    """
    Reshape the CWA `records.location` array.

    Args:
        locations: Raw CWA locations, may be None when CWA sent none.

    Returns:
        list[CityForecast]: One entry per location, in input order.

    Raises:
        NoForecastDataError: If there are no locations.
        ForecastDataError: If a location's elements disagree on time windows.
    """
    if not locations:
        raise NoForecastDataError()

    cities = [transform_location(location) for location in locations]
    logger.debug("Transformed CWA forecast", extra={"cities": len(cities)})
    return cities
