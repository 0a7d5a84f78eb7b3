"""
OpenTelemetry tracing initialization (OTLP -> Collector).

Only active when OTEL_TRACES_EXPORTER=otlp; otherwise the API's no-op tracer
stays in place.
"""

from __future__ import annotations

import threading
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

_LOCK = threading.Lock()
_INITIALIZED = False


def init_tracing(
    *,
    service_name: str,
    service_version: Optional[str],
    endpoint: str,
    protocol: str,
) -> None:
    """
    Initialize OpenTelemetry tracing once per process.

    Args:
        service_name: e.g. "weather_api"
        service_version: optional version string
        endpoint: base OTLP endpoint
        protocol: "http/protobuf" or "grpc"
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
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )

            exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
        else:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )

            exporter = OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")

        provider = TracerProvider(resource=Resource.create(resource_attrs))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        _INITIALIZED = True


def shutdown_tracing() -> None:
    """Flush and shutdown tracing provider."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
