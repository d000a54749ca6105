"""
HTTP clients.

- OpenWeatherClient: current weather for a city name
- HistoryClient: posts a queried city to the history endpoint

Both open an httpx.AsyncClient per call; `transport` lets tests swap in
httpx.MockTransport.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .schemas import WeatherReading


class WeatherError(RuntimeError):
    """Raised for user-facing weather lookup failures."""
    pass


class CityNotFound(WeatherError):
    """OpenWeather answered with a failure `cod` (unknown or invalid city)."""

    def __init__(self, city: str, cod: int, message: str = ""):
        super().__init__(f"City not found: {city!r} (cod={cod}) {message}".strip())
        self.city = city
        self.cod = cod


class WeatherTransportError(WeatherError):
    """Network failure or an unreadable payload."""
    pass


class HistoryRecordError(RuntimeError):
    """The history endpoint could not be reached or did not answer 201."""
    pass


def _status_of(payload: Dict[str, Any], http_status: int) -> int:
    # `cod` is an int on success and a string ("404") on failure
    cod = payload.get("cod", http_status)
    try:
        return int(cod)
    except (TypeError, ValueError):
        raise WeatherTransportError(f"Unexpected cod in weather payload: {cod!r}")


class OpenWeatherClient:
    """
    OpenWeatherMap wrapper.

    Endpoint used:
    - Current weather:
        /data/2.5/weather?q=CITY&lang=es&units=metric&appid=KEY
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org",
        lang: str = "es",
        units: str = "metric",
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base = base_url.rstrip("/")
        self.lang = lang
        self.units = units
        self.timeout_s = timeout_s
        self.transport = transport

    async def current_weather(self, city: str) -> WeatherReading:
        """
        Retrieves current conditions for a city name.

        Raises CityNotFound when the payload's `cod` is >= 400 and
        WeatherTransportError when the request or JSON decoding fails.
        """
        params = {"q": city, "lang": self.lang, "units": self.units, "appid": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                r = await client.get(f"{self.base}/data/2.5/weather", params=params)
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise WeatherTransportError(f"Weather request failed for {city!r}: {e}") from e

        if not isinstance(data, dict):
            raise WeatherTransportError(f"Unexpected weather payload for {city!r}")

        cod = _status_of(data, r.status_code)
        if cod >= 400:
            raise CityNotFound(city, cod, str(data.get("message", "")))

        try:
            return WeatherReading.from_payload(data)
        except (KeyError, IndexError, TypeError, ValidationError) as e:
            raise WeatherTransportError(f"Incomplete weather payload for {city!r}: {e}") from e


class HistoryClient:
    """Posts `{"ciudad": ...}` to the history recorder endpoint."""

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout_s = timeout_s
        self.transport = transport

    async def record(self, city: str) -> Dict[str, Any]:
        """Returns the acknowledgment body; raises HistoryRecordError otherwise."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                r = await client.post(self.url, json={"ciudad": city})
        except httpx.HTTPError as e:
            raise HistoryRecordError(f"History endpoint unreachable: {e}") from e

        if r.status_code != 201:
            raise HistoryRecordError(f"History endpoint failed ({r.status_code}): {r.text}")
        try:
            return r.json()
        except ValueError as e:
            raise HistoryRecordError(f"History endpoint sent an unreadable ack: {e}") from e
