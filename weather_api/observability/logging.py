"""
Structured logging with trace/span correlation.

Emits JSON (or plain text) log lines to stdout and injects:
- trace_id / span_id (from current OpenTelemetry context)
- service_name / service_version
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, MutableMapping, Optional

from opentelemetry import trace

# LogRecord attributes that are not user-supplied `extra` fields
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "trace_id", "span_id", "service_name", "service_version"}


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _current_trace_span_ids() -> tuple[Optional[str], Optional[str]]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx or not ctx.is_valid:
        return (None, None)
    return (f"{ctx.trace_id:032x}", f"{ctx.span_id:016x}")


class TraceContextFilter(logging.Filter):
    """Inject trace/span + service metadata into every LogRecord."""

    def __init__(self, *, service_name: str, service_version: Optional[str]) -> None:
        super().__init__()
        self._service_name = service_name
        self._service_version = service_version

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        trace_id, span_id = _current_trace_span_ids()
        record.trace_id = trace_id
        record.span_id = span_id
        record.service_name = self._service_name
        record.service_version = self._service_version
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: MutableMapping[str, Any] = {
            "ts": int(time.time() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "service_name": getattr(record, "service_name", None),
            "service_version": getattr(record, "service_version", None),
            "trace_id": getattr(record, "trace_id", None),
            "span_id": getattr(record, "span_id", None),
        }

        # logger.info("x", extra={"foo": "bar"})
        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    *,
    service_name: str,
    service_version: Optional[str] = None,
    log_level: str = "info",
    fmt: str = "json",
) -> None:
    """
    Configure process-wide logging.

    Args:
        service_name: Service name.
        service_version: Optional version.
        log_level: LOG_LEVEL value (debug, info, ...).
        fmt: "json" or "text".
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)

    # Clear handlers to avoid duplicate logs on reloads.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.addFilter(
        TraceContextFilter(service_name=service_name, service_version=service_version)
    )

    if fmt.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s "
                "service=%(service_name)s trace_id=%(trace_id)s - %(message)s"
            )
        )

    root.addHandler(handler)

    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
