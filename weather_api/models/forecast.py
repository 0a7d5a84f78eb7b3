from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ForecastEntry(BaseModel):
    """
    One forecast time window for a city.
    Every value is a display string; a field stays empty when CWA did not
    publish the matching weather element for that window.
    Attributes:
        start_time (str): Window start as given by CWA.
        end_time (str): Window end as given by CWA.
        weather (str): Weather description (Wx).
        rain (str): Probability of precipitation with a "%" suffix (PoP).
        min_temp (str): Minimum temperature with a "°C" suffix (MinT or T).
        max_temp (str): Maximum temperature with a "°C" suffix (MaxT).
        comfort (str): Comfort index (CI).
        wind_speed (str): Wind speed (WS).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_time: str = Field(..., examples=["2026-10-18 18:00:00"])
    end_time: str = Field(..., examples=["2026-10-19 06:00:00"])
    weather: str = Field(default="", examples=["多雲時晴"])
    rain: str = Field(default="", examples=["20%"])
    min_temp: str = Field(default="", examples=["22°C"])
    max_temp: str = Field(default="", examples=["27°C"])
    comfort: str = Field(default="", examples=["舒適"])
    wind_speed: str = ""


class CityForecast(BaseModel):
    """Forecast windows for one city, in CWA order."""

    city: str = Field(..., examples=["臺北市"])
    forecasts: list[ForecastEntry] = Field(default_factory=list)
