"""
HTTP clients.

One shared httpx AsyncClient per process for connection pooling, wrapped by
`CwaForecastClient` which knows the CWA datastore URL and error semantics.
OTel httpx instrumentation (enabled at startup) propagates trace headers.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from weather_api.core.config import CwaSettings
from weather_api.core.exceptions import (
    ConfigurationError,
    UpstreamHTTPError,
    UpstreamUnavailableError,
)
from weather_api.core.metrics import inc_upstream_error, observe_upstream_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for shared http client."""

    # None disables the client-side timeout
    timeout_seconds: Optional[float] = None


def create_httpx_client(cfg: HttpClientConfig) -> httpx.AsyncClient:
    """
    Create a shared AsyncClient.

    Args:
        cfg: HTTP client config

    Returns:
        httpx.AsyncClient
    """
    timeout = httpx.Timeout(timeout=cfg.timeout_seconds)
    limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        headers={"Accept": "application/json"},
    )


class ForecastUpstream(Protocol):
    """Anything able to return the raw CWA forecast payload."""

    async def fetch_forecast(self) -> dict[str, Any]: ...


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class CwaForecastClient:
    """
    CWA open-data datastore client:
      GET {base}/v1/rest/datastore/{dataset}?Authorization=<key>

    No retries: every failure is terminal for the calling request.
    """

    def __init__(self, http: httpx.AsyncClient, settings: CwaSettings) -> None:
        self._http = http
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.api_key is not None

    async def fetch_forecast(self) -> dict[str, Any]:
        """
        Fetch the nationwide forecast dataset.

        Returns:
            dict: Parsed CWA payload.

        Raises:
            ConfigurationError: CWA_API_KEY is not set; nothing is sent.
            UpstreamHTTPError: CWA answered with a non-2xx status.
            UpstreamUnavailableError: No response, or a body that is not JSON.
        """
        if not self.configured:
            raise ConfigurationError()

        url = self._settings.forecast_url
        started = time.perf_counter()
        try:
            response = await self._http.get(
                url, params={"Authorization": self._settings.api_key}
            )
        except httpx.RequestError as exc:
            inc_upstream_error(type(exc).__name__)
            logger.error(
                "CWA request failed",
                extra={"url": url, "error_type": type(exc).__name__, "error": str(exc)},
            )
            raise UpstreamUnavailableError() from exc

        observe_upstream_request(
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - started) * 1000.0,
        )

        if response.is_error:
            inc_upstream_error("http_status")
            body = _response_body(response)
            logger.error(
                "CWA returned an error status",
                extra={"url": url, "status_code": response.status_code},
            )
            raise UpstreamHTTPError(status_code=response.status_code, body=body)

        try:
            payload = response.json()
        except ValueError as exc:
            inc_upstream_error("invalid_json")
            logger.error("CWA response was not JSON", extra={"url": url})
            raise UpstreamUnavailableError() from exc

        if not isinstance(payload, dict):
            inc_upstream_error("invalid_json")
            logger.error("CWA response was not a JSON object", extra={"url": url})
            raise UpstreamUnavailableError()
        return payload
