import httpx
import pytest

from tests.conftest import Recorder, json_response
from weather_api.core.clients import CwaForecastClient
from weather_api.core.config import CwaSettings
from weather_api.core.exceptions import (
    ConfigurationError,
    UpstreamHTTPError,
    UpstreamUnavailableError,
)

pytestmark = pytest.mark.anyio


def _client(recorder: Recorder, api_key="secret") -> CwaForecastClient:
    settings = CwaSettings(api_key=api_key, api_base_url="https://cwa.test/api/")
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return CwaForecastClient(http, settings)


async def test_requests_dataset_with_authorization_param():
    recorder = Recorder(json_response(200, {"records": {"location": []}}))

    payload = await _client(recorder).fetch_forecast()

    assert payload == {"records": {"location": []}}
    (request,) = recorder.requests
    assert request.method == "GET"
    assert request.url.path == "/api/v1/rest/datastore/F-C0032-001"
    assert request.url.params["Authorization"] == "secret"


@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_missing_key_sends_nothing(api_key):
    recorder = Recorder(json_response(200, {}))

    with pytest.raises(ConfigurationError):
        await _client(recorder, api_key=api_key).fetch_forecast()

    assert recorder.requests == []


async def test_http_error_keeps_status_and_body():
    body = {"message": "rate limited"}
    recorder = Recorder(json_response(503, body))

    with pytest.raises(UpstreamHTTPError) as exc_info:
        await _client(recorder).fetch_forecast()

    assert exc_info.value.http_status == 503
    assert exc_info.value.message == "rate limited"
    assert exc_info.value.details == body


async def test_http_error_with_text_body_uses_default_message():
    recorder = Recorder(lambda request: httpx.Response(401, text="Unauthorized"))

    with pytest.raises(UpstreamHTTPError) as exc_info:
        await _client(recorder).fetch_forecast()

    assert exc_info.value.http_status == 401
    assert exc_info.value.message == "無法取得天氣資料"
    assert exc_info.value.details == "Unauthorized"


async def test_network_failure_is_unavailable():
    def respond(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await _client(Recorder(respond)).fetch_forecast()

    assert exc_info.value.http_status == 500
    assert exc_info.value.details is None


async def test_non_json_success_is_unavailable():
    recorder = Recorder(lambda request: httpx.Response(200, text="<html></html>"))

    with pytest.raises(UpstreamUnavailableError):
        await _client(recorder).fetch_forecast()


async def test_http_error_with_non_string_message_keeps_status():
    body = {"message": {"code": 42}}
    recorder = Recorder(json_response(400, body))

    with pytest.raises(UpstreamHTTPError) as exc_info:
        await _client(recorder).fetch_forecast()

    assert exc_info.value.http_status == 400
    assert exc_info.value.message == "無法取得天氣資料"
    assert exc_info.value.details == body
    assert exc_info.value.to_response().details == body
