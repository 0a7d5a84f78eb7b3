"""
Upstream call metrics (OpenTelemetry).

Signals we emit:
- cwa_requests_total{status}
- cwa_request_duration_ms{status}
- cwa_errors_total{error_type}

Instruments come from the global meter provider, so they are no-ops until
metric export is enabled.
"""

from __future__ import annotations

from opentelemetry.metrics import Counter, Histogram

from weather_api.observability.metrics import get_meter

_meter = get_meter("weather_api")

cwa_requests_total: Counter = _meter.create_counter(
    name="cwa_requests_total",
    description="Total number of requests sent to the CWA open-data API",
    unit="1",
)

cwa_errors_total: Counter = _meter.create_counter(
    name="cwa_errors_total",
    description="Total number of failed CWA open-data API calls",
    unit="1",
)

cwa_request_duration_ms: Histogram = _meter.create_histogram(
    name="cwa_request_duration_ms",
    description="CWA open-data API latency (ms)",
    unit="ms",
)


def inc_upstream_error(error_type: str) -> None:
    """Increment upstream error counter."""
    cwa_errors_total.add(1, attributes={"error_type": error_type})


def observe_upstream_request(*, status_code: int, duration_ms: float) -> None:
    """Record request count + latency for one CWA call."""
    attrs = {"status": str(status_code)}
    cwa_requests_total.add(1, attributes=attrs)
    cwa_request_duration_ms.record(duration_ms, attributes=attrs)
