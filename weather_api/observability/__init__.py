"""
Observability bootstrap.

- Structured logging with trace/span correlation
- OpenTelemetry tracing and metrics providers (OTLP -> Collector), opt-in
- FastAPI (incoming) and httpx (outgoing) instrumentation
"""

from __future__ import annotations

from fastapi import FastAPI

from weather_api.core.config import ObservabilitySettings, ServiceIdentitySettings

from .http_instrumentation import instrument_fastapi, instrument_httpx
from .logging import configure_logging
from .metrics import init_metrics, shutdown_metrics
from .tracing import init_tracing, shutdown_tracing


def setup_observability(
    app: FastAPI,
    *,
    identity: ServiceIdentitySettings,
    obs: ObservabilitySettings,
) -> None:
    """
    Initialize logging, optional OTLP export and instrumentation.

    Called once per app from the app factory. Providers are process-wide and
    initialized at most once; `shutdown_observability` belongs to process exit.
    """
    configure_logging(
        service_name=identity.service_name,
        service_version=identity.service_version,
        log_level=obs.log_level,
        fmt=obs.log_format,
    )

    if obs.otel_traces_exporter == "otlp":
        init_tracing(
            service_name=identity.service_name,
            service_version=identity.service_version,
            endpoint=obs.otel_exporter_otlp_endpoint,
            protocol=obs.otel_exporter_otlp_protocol,
        )

    if obs.otel_metrics_exporter == "otlp":
        init_metrics(
            service_name=identity.service_name,
            service_version=identity.service_version,
            endpoint=obs.otel_exporter_otlp_endpoint,
            protocol=obs.otel_exporter_otlp_protocol,
            export_interval_seconds=obs.metric_export_interval_seconds,
        )

    instrument_fastapi(app)
    instrument_httpx()


def shutdown_observability() -> None:
    """Flush and shutdown telemetry providers. Call once, on process exit."""
    shutdown_metrics()
    shutdown_tracing()


__all__ = [
    "configure_logging",
    "setup_observability",
    "shutdown_observability",
]
