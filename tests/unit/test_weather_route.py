from typing import Any

import httpx
import pytest

from tests.conftest import WINDOWS, json_response, make_location, make_payload
from weather_api.api.routes.weather import all_cities_weather
from weather_api.core.config import CwaSettings, ObservabilitySettings, Settings
from weather_api.core.exceptions import ConfigurationError


class FakeUpstream:
    def __init__(self, payload: Any = None, error: Exception = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0

    async def fetch_forecast(self) -> dict:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.mark.anyio
async def test_handler_returns_status_and_body_without_a_server():
    upstream = FakeUpstream(make_payload([make_location("臺北市")]))

    status, body = await all_cities_weather(None, upstream)

    assert status == 200
    assert upstream.calls == 1
    assert body["success"] is True
    assert body["data"][0]["city"] == "臺北市"


@pytest.mark.anyio
async def test_handler_maps_app_errors():
    status, body = await all_cities_weather(None, FakeUpstream(error=ConfigurationError()))

    assert status == 500
    assert body == {"error": "伺服器設定錯誤", "message": "請在 .env 檔案中設定 CWA_API_KEY"}


def test_all_cities(client_factory):
    cities = ["臺北市", "新北市", "桃園市"]
    client, recorder = client_factory(
        json_response(200, make_payload([make_location(c) for c in cities]))
    )

    resp = client.get("/api/weather/all")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["updateTime"] == "三十六小時天氣預報"
    assert [c["city"] for c in body["data"]] == cities
    first = body["data"][0]["forecasts"][0]
    assert first == {
        "startTime": WINDOWS[0][0],
        "endTime": WINDOWS[0][1],
        "weather": "多雲時晴",
        "rain": "60%",
        "minTemp": "20°C",
        "maxTemp": "27°C",
        "comfort": "舒適",
        "windSpeed": "",
    }
    assert len(recorder.requests) == 1


def test_update_time_omitted_when_upstream_has_none(client_factory):
    client, _ = client_factory(
        json_response(200, {"records": {"location": [make_location("臺東縣")]}})
    )

    body = client.get("/api/weather/all").json()

    assert "updateTime" not in body
    assert body["data"][0]["city"] == "臺東縣"


@pytest.mark.parametrize(
    "payload", [make_payload([]), {"records": {}}, {"success": "true"}]
)
def test_empty_locations_is_404(client_factory, payload):
    client, _ = client_factory(json_response(200, payload))

    resp = client.get("/api/weather/all")

    assert resp.status_code == 404
    assert resp.json() == {"error": "查無資料", "message": "無法取得任何縣市天氣資料"}


def test_missing_api_key_is_500_without_outbound_call(client_factory):
    settings = Settings(
        cwa=CwaSettings(api_key=None), obs=ObservabilitySettings(log_format="text")
    )
    client, recorder = client_factory(json_response(200, make_payload([])), settings)

    resp = client.get("/api/weather/all")

    assert resp.status_code == 500
    assert resp.json()["error"] == "伺服器設定錯誤"
    assert "CWA_API_KEY" in resp.json()["message"]
    assert len(recorder.requests) == 0


def test_upstream_http_error_is_forwarded(client_factory):
    client, _ = client_factory(json_response(503, {"message": "rate limited"}))

    resp = client.get("/api/weather/all")

    assert resp.status_code == 503
    assert resp.json() == {
        "error": "CWA API 錯誤",
        "message": "rate limited",
        "details": {"message": "rate limited"},
    }


def test_network_failure_is_generic_500(client_factory):
    def respond(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client, _ = client_factory(respond)

    resp = client.get("/api/weather/all")

    assert resp.status_code == 500
    assert resp.json() == {"error": "伺服器錯誤", "message": "無法取得天氣資料，請稍後再試"}


def test_inconsistent_time_windows_is_502(client_factory):
    location = make_location("南投縣")
    location["weatherElement"][1]["time"].pop()
    client, _ = client_factory(json_response(200, make_payload([location])))

    resp = client.get("/api/weather/all")

    assert resp.status_code == 502
    assert resp.json()["error"] == "CWA 資料格式錯誤"
    assert "PoP" in resp.json()["message"]


def test_upstream_error_with_structured_message_is_forwarded(client_factory):
    body = {"message": {"code": 42}}
    client, _ = client_factory(json_response(400, body))

    resp = client.get("/api/weather/all")

    assert resp.status_code == 400
    assert resp.json() == {
        "error": "CWA API 錯誤",
        "message": "無法取得天氣資料",
        "details": body,
    }


def test_unknown_element_with_other_cadence_is_served(client_factory):
    location = make_location("臺北市")
    location["weatherElement"].append(
        {
            "elementName": "UVI",
            "time": [
                {"startTime": s, "endTime": e, "parameter": {"parameterName": "9"}}
                for s, e in WINDOWS[:2]
            ],
        }
    )
    client, _ = client_factory(json_response(200, make_payload([location])))

    resp = client.get("/api/weather/all")

    assert resp.status_code == 200
    assert len(resp.json()["data"][0]["forecasts"]) == len(WINDOWS)
