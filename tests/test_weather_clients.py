import json

import httpx
import pytest

from clima.weather_clients import (
    CityNotFound,
    HistoryClient,
    HistoryRecordError,
    OpenWeatherClient,
    WeatherTransportError,
)
from conftest import not_found_payload, weather_payload


def owm(handler) -> OpenWeatherClient:
    return OpenWeatherClient("secret", base_url="http://owm.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_current_weather_sends_expected_query_and_parses_reading():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=weather_payload("Salta", condition="Rain", temp=18.0))

    reading = await owm(handler).current_weather("Salta")

    assert seen["path"] == "/data/2.5/weather"
    assert seen["params"] == {"q": "Salta", "lang": "es", "units": "metric", "appid": "secret"}
    assert reading.city_name == "Salta"
    assert reading.current_temp == 18.0
    assert reading.min_temp == 15.0
    assert reading.max_temp == 22.0
    assert reading.humidity_pct == 65
    assert reading.condition_code == "Rain"
    assert reading.raw["cod"] == 200


@pytest.mark.asyncio
async def test_failure_cod_in_body_is_city_not_found():
    def handler(request):
        return httpx.Response(404, json=not_found_payload())

    with pytest.raises(CityNotFound) as exc:
        await owm(handler).current_weather("Nowhere")
    assert exc.value.cod == 404
    assert exc.value.city == "Nowhere"


@pytest.mark.asyncio
async def test_body_cod_wins_over_http_status():
    def handler(request):
        return httpx.Response(200, json={"cod": 401, "message": "Invalid API key"})

    with pytest.raises(CityNotFound):
        await owm(handler).current_weather("Salta")


@pytest.mark.asyncio
async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(WeatherTransportError):
        await owm(handler).current_weather("Salta")


@pytest.mark.asyncio
async def test_non_json_body_is_transport_error():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(WeatherTransportError):
        await owm(handler).current_weather("Salta")


@pytest.mark.asyncio
async def test_incomplete_payload_is_transport_error():
    def handler(request):
        return httpx.Response(200, json={"cod": 200, "name": "Salta"})

    with pytest.raises(WeatherTransportError):
        await owm(handler).current_weather("Salta")


@pytest.mark.asyncio
async def test_history_client_posts_city():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"mensaje": "ok"})

    client = HistoryClient("http://history.test/HistorialCiudades", transport=httpx.MockTransport(handler))
    ack = await client.record("Salta")

    assert ack == {"mensaje": "ok"}
    assert bodies == [{"ciudad": "Salta"}]


@pytest.mark.asyncio
async def test_history_client_raises_on_server_error():
    def handler(request):
        return httpx.Response(500, json={"error": "Error interno del servidor"})

    client = HistoryClient("http://history.test/HistorialCiudades", transport=httpx.MockTransport(handler))
    with pytest.raises(HistoryRecordError):
        await client.record("Salta")
