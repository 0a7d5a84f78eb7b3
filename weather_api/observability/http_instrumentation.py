"""
HTTP instrumentation helpers.

- FastAPI: instrument incoming requests
- httpx: instrument outgoing calls and propagate trace headers

The CWA key travels as the `Authorization` query parameter, so outgoing span
URLs are rewritten before export.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

logger = logging.getLogger(__name__)

REDACTED = "REDACTED"
SECRET_QUERY_PARAMS = ("Authorization",)
# old and new semantic-convention keys for the full request URL
URL_ATTRIBUTES = ("http.url", "url.full")


def redact_url(url: Any) -> str:
    """Return `url` with secret query parameter values replaced."""
    parsed = httpx.URL(str(url))
    for name in SECRET_QUERY_PARAMS:
        if name in parsed.params:
            parsed = parsed.copy_set_param(name, REDACTED)
    return str(parsed)


def scrub_span_url(span: Any, request: Any) -> None:
    """httpx request hook: overwrite URL attributes already set on the span."""
    if span is None or not span.is_recording():
        return
    redacted = redact_url(request.url)
    attributes = getattr(span, "attributes", None) or {}
    for key in URL_ATTRIBUTES:
        if key in attributes:
            span.set_attribute(key, redacted)


async def scrub_span_url_async(span: Any, request: Any) -> None:
    scrub_span_url(span, request)


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument a FastAPI app (incoming HTTP requests)."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_httpx() -> None:
    """Instrument httpx once per process, with URL scrubbing hooks."""
    instrumentor = HTTPXClientInstrumentor()
    if instrumentor.is_instrumented_by_opentelemetry:
        return
    instrumentor.instrument(
        request_hook=scrub_span_url, async_request_hook=scrub_span_url_async
    )
    logger.info("httpx OpenTelemetry instrumentation enabled")
