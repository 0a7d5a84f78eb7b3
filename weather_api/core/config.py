"""
Weather API settings.

Typed, env-driven configuration (pydantic-settings). Settings are built once
at process start by `load_settings()` and passed explicitly into the app
factory; nothing reads the environment after that.

Each block owns its own env prefix:
- HOST / PORT                      -> HttpServerSettings
- SERVICE_NAME / ENVIRONMENT       -> ServiceIdentitySettings
- LOG_LEVEL / OTEL_*               -> ObservabilitySettings
- CWA_*                            -> CwaSettings
- CORS_*                           -> CorsSettings
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from weather_api import __version__

LogFormat = Literal["json", "text"]
OtlpProtocol = Literal["http/protobuf", "grpc"]

_BASE_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    env_ignore_empty=True,
    extra="ignore",
    populate_by_name=True,
)


class HttpServerSettings(BaseSettings):
    """HTTP server bind settings."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT", ge=1, le=65535)


class ServiceIdentitySettings(BaseSettings):
    """Service identity used for telemetry resource attributes and logs."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="")

    service_name: str = Field(default="weather_api", alias="SERVICE_NAME")
    service_version: Optional[str] = Field(default=__version__, alias="SERVICE_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")


class ObservabilitySettings(BaseSettings):
    """Logging and OpenTelemetry export settings."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="")

    log_level: str = Field(default="info", alias="LOG_LEVEL")
    log_format: LogFormat = Field(default="json", alias="LOG_FORMAT")

    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4318",
        alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="Base OTLP endpoint (collector)",
    )
    otel_exporter_otlp_protocol: OtlpProtocol = Field(
        default="http/protobuf", alias="OTEL_EXPORTER_OTLP_PROTOCOL"
    )

    # "otlp" turns export on; anything else leaves the no-op providers in place
    otel_traces_exporter: str = Field(default="none", alias="OTEL_TRACES_EXPORTER")
    otel_metrics_exporter: str = Field(default="none", alias="OTEL_METRICS_EXPORTER")

    metric_export_interval_seconds: int = Field(
        default=10, alias="OTEL_METRIC_EXPORT_INTERVAL", ge=1
    )


class CwaSettings(BaseSettings):
    """
    CWA open-data API settings.

    Environment variables:
      - CWA_API_KEY          authorization key issued by opendata.cwa.gov.tw
      - CWA_API_BASE_URL     defaults to https://opendata.cwa.gov.tw/api
      - CWA_DATASET_ID       defaults to F-C0032-001 (36h nationwide forecast)
      - CWA_TIMEOUT_SECONDS  unset means no client-side timeout
    """

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="CWA_")

    api_key: Optional[str] = None
    api_base_url: str = "https://opendata.cwa.gov.tw/api"
    dataset_id: str = "F-C0032-001"
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    @field_validator("api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def forecast_url(self) -> str:
        return f"{self.api_base_url}/v1/rest/datastore/{self.dataset_id}"


class CorsSettings(BaseSettings):
    """Cross-origin settings. CORS_ALLOW_ORIGINS="https://a.tw,https://b.tw"."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="CORS_")

    allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    @field_validator("allow_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


class Settings(BaseSettings):
    """Typed settings for the weather_api service."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="WEATHER_API_")

    identity: ServiceIdentitySettings = Field(default_factory=ServiceIdentitySettings)
    http: HttpServerSettings = Field(default_factory=HttpServerSettings)
    obs: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    cwa: CwaSettings = Field(default_factory=CwaSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    return Settings()
