"""
OpenTelemetry metrics initialization (OTLP -> Collector).

Only active when OTEL_METRICS_EXPORTER=otlp.
"""

from __future__ import annotations

import threading
from typing import Optional

from opentelemetry import metrics
from opentelemetry.metrics import Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource

_LOCK = threading.Lock()
_INITIALIZED = False


def init_metrics(
    *,
    service_name: str,
    service_version: Optional[str],
    endpoint: str,
    protocol: str,
    export_interval_seconds: int = 10,
) -> None:
    """
    Initialize OpenTelemetry metrics provider once per process.

    Args:
        service_name: e.g. "weather_api"
        service_version: optional version string
        endpoint: base OTLP endpoint
        protocol: "http/protobuf" or "grpc"
        export_interval_seconds: push interval
    """
    global _INITIALIZED
    with _LOCK:
        if _INITIALIZED:
            return

        resource_attrs = {SERVICE_NAME: service_name}
        if service_version:
            resource_attrs[SERVICE_VERSION] = service_version

        endpoint = endpoint.rstrip("/")
        if protocol == "grpc":
            from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
                OTLPMetricExporter,
            )

            exporter = OTLPMetricExporter(endpoint=endpoint, insecure=True)
        else:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
                OTLPMetricExporter,
            )

            exporter = OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics")

        reader = PeriodicExportingMetricReader(
            exporter, export_interval_millis=export_interval_seconds * 1000
        )
        provider = MeterProvider(
            resource=Resource.create(resource_attrs), metric_readers=[reader]
        )
        metrics.set_meter_provider(provider)

        _INITIALIZED = True


def shutdown_metrics() -> None:
    """Flush and shutdown metrics provider."""
    provider = metrics.get_meter_provider()
    if isinstance(provider, MeterProvider):
        provider.shutdown()


def get_meter(name: str) -> Meter:
    """Return a Meter for instrument creation."""
    return metrics.get_meter(name)
