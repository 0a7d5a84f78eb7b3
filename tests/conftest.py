from contextlib import ExitStack
from typing import Any, Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from weather_api.core.config import (
    CwaSettings,
    ObservabilitySettings,
    Settings,
)
from weather_api.main import create_app


def make_element(name: str, values: list[str], windows: list[tuple[str, str]]) -> dict:
    return {
        "elementName": name,
        "time": [
            {"startTime": start, "endTime": end, "parameter": {"parameterName": value}}
            for (start, end), value in zip(windows, values)
        ],
    }


WINDOWS = [
    ("2026-10-18 18:00:00", "2026-10-19 06:00:00"),
    ("2026-10-19 06:00:00", "2026-10-19 18:00:00"),
    ("2026-10-19 18:00:00", "2026-10-20 06:00:00"),
]


def make_location(city: str, windows: list[tuple[str, str]] = WINDOWS) -> dict:
    n = len(windows)
    return {
        "locationName": city,
        "weatherElement": [
            make_element("Wx", ["多雲時晴"] * n, windows),
            make_element("PoP", ["60"] * n, windows),
            make_element("MinT", ["20"] * n, windows),
            make_element("CI", ["舒適"] * n, windows),
            make_element("MaxT", ["27"] * n, windows),
        ],
    }


def make_payload(locations: list[dict]) -> dict:
    return {
        "success": "true",
        "records": {"datasetDescription": "三十六小時天氣預報", "location": locations},
    }


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        cwa=CwaSettings(api_key="test-key", api_base_url="https://cwa.test/api"),
        obs=ObservabilitySettings(log_format="text"),
    )


class Recorder:
    """Collects the requests seen by an httpx.MockTransport."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)


@pytest.fixture
def client_factory(settings: Settings):
    """Build a TestClient whose outbound calls go to a MockTransport."""
    stack = ExitStack()

    def factory(
        respond: Callable[[httpx.Request], httpx.Response],
        app_settings: Optional[Settings] = None,
    ) -> tuple[TestClient, Recorder]:
        recorder = Recorder(respond)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        app = create_app(app_settings or settings, http_client=http_client)
        client = stack.enter_context(TestClient(app, raise_server_exceptions=False))
        return client, recorder

    with stack:
        yield factory


def json_response(status_code: int, body: Any) -> Callable[[httpx.Request], httpx.Response]:
    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return respond
