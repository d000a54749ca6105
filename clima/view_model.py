"""
Client view-model.

Owns the UI state for one viewer (selected city, last reading, loading and
error flags) and drives it from a single outbound weather lookup:

    set_city -> fetch_weather -> (success) render reading + record city
                              -> (failure) clear reading + flag error

Recording the city is a detached task: its outcome is captured as a
RecordOutcome and logged, never surfaced in the view state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from .icons import map_condition_to_icon
from .schemas import WeatherReading
from .weather_clients import HistoryClient, HistoryRecordError, OpenWeatherClient, WeatherError

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Cargando..."
NOT_FOUND_MESSAGE = "No se encontró la ciudad..."


@dataclass
class ViewState:
    selected_city: str
    reading: Optional[WeatherReading] = None
    is_loading: bool = True
    has_error: bool = False


@dataclass(frozen=True)
class RecordOutcome:
    """Result of one fire-and-forget history call."""
    city: str
    ok: bool
    ack: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class HistoryRecorder:
    """
    Spawns history calls as detached tasks and keeps a handle on them so
    they can be drained at shutdown. One attempt per city, no retry.
    """

    def __init__(self, client: HistoryClient):
        self.client = client
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, city: str) -> asyncio.Task:
        task = asyncio.create_task(self._record(city))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _record(self, city: str) -> RecordOutcome:
        try:
            ack = await self.client.record(city)
        except HistoryRecordError as e:
            logger.error("Error al guardar ciudad en historial: %s", e)
            return RecordOutcome(city=city, ok=False, error=str(e))
        except Exception as e:
            logger.exception("Error inesperado al guardar ciudad en historial: %r", city)
            return RecordOutcome(city=city, ok=False, error=f"{type(e).__name__}: {e}")

        logger.info("Ciudad guardada en el historial: %s -> %s", city, ack)
        return RecordOutcome(city=city, ok=True, ack=ack)

    async def drain(self) -> None:
        """Wait for every in-flight history call."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()


class WeatherViewModel:
    """
    UI state machine for the weather card.

    Fetches are never cancelled: if the user picks a new city while an
    older lookup is in flight, whichever lookup resolves last writes the
    reading.
    """

    def __init__(self, weather: OpenWeatherClient, recorder: HistoryRecorder, default_city: str):
        self.weather = weather
        self.recorder = recorder
        self.state = ViewState(selected_city=default_city)

    async def set_city(self, name: str) -> None:
        self.state.selected_city = name
        await self.fetch_weather()

    async def fetch_weather(self) -> None:
        city = self.state.selected_city
        self.state.is_loading = True
        self.state.has_error = False
        try:
            reading = await self.weather.current_weather(city)
        except WeatherError as e:
            logger.warning("Weather lookup failed for %r: %s", city, e)
            self.state.reading = None
            self.state.has_error = True
        else:
            self.state.reading = reading
            self.recorder.spawn(city)
        finally:
            self.state.is_loading = False

    @staticmethod
    def map_condition_to_icon(condition_code: str) -> str:
        return map_condition_to_icon(condition_code)

    @property
    def icon(self) -> Optional[str]:
        if self.state.reading is None:
            return None
        return map_condition_to_icon(self.state.reading.condition_code)

    @property
    def status_message(self) -> Optional[str]:
        if self.state.is_loading:
            return LOADING_MESSAGE
        if self.state.has_error:
            return NOT_FOUND_MESSAGE
        return None

    def to_dict(self) -> Dict[str, Any]:
        """View state as plain JSON-able data (reading without the raw payload)."""
        reading = self.state.reading
        return {
            "selected_city": self.state.selected_city,
            "is_loading": self.state.is_loading,
            "has_error": self.state.has_error,
            "message": self.status_message,
            "reading": reading.model_dump(exclude={"raw"}) if reading else None,
            "icon": self.icon,
        }
