import os

# clima.main builds a module-level app from the environment on import
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from clima.settings import Settings


def weather_payload(city: str, condition: str = "Clear", temp: float = 21.5) -> dict:
    """Trimmed OpenWeather /data/2.5/weather success body."""
    return {
        "cod": 200,
        "name": city,
        "main": {"temp": temp, "temp_min": temp - 3, "temp_max": temp + 4, "humidity": 65},
        "weather": [{"id": 800, "main": condition, "description": "cielo claro", "icon": "01d"}],
    }


def not_found_payload() -> dict:
    return {"cod": "404", "message": "city not found"}


@pytest.fixture
def test_settings():
    return Settings(
        openweather_api_key="test-key",
        openweather_base_url="http://owm.test",
        history_url="http://history.test/HistorialCiudades",
        database_url="sqlite://",
    )


@pytest.fixture
def history_calls():
    """Cities posted to the history endpoint, in arrival order."""
    return []


@pytest.fixture
def history_transport(history_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        history_calls.append(json.loads(request.content)["ciudad"])
        return httpx.Response(201, json={"mensaje": "Ciudad guardada en el historial"})

    return httpx.MockTransport(handler)


@pytest.fixture
def weather_transport():
    """Knows Salta and Tucuman; anything else is a 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        city = request.url.params["q"]
        if city in ("Salta", "Tucuman"):
            return httpx.Response(200, json=weather_payload(city))
        return httpx.Response(404, json=not_found_payload())

    return httpx.MockTransport(handler)


@pytest.fixture
def app(test_settings, weather_transport, history_transport):
    from clima.main import create_app

    return create_app(test_settings, weather_transport=weather_transport, history_transport=history_transport)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
