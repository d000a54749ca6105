"""
Pydantic schemas.

Defines the contract of the history endpoint and the parsed shape of an
OpenWeather current-weather payload.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class HistoryCreate(BaseModel):
    """
    Body of POST /HistorialCiudades.
    No validation beyond type coercion: a missing city is stored as NULL.
    """
    model_config = ConfigDict(extra="ignore")

    ciudad: Optional[str] = None

    @field_validator("ciudad", mode="before")
    @classmethod
    def cast_scalar(cls, v: Any) -> Any:
        # Scalars are cast to text the way a JSON client would print them
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class HistoryAck(BaseModel):
    mensaje: str


class HistoryFailure(BaseModel):
    error: str


class WeatherReading(BaseModel):
    """
    The subset of an OpenWeather /data/2.5/weather response the UI shows.
    `raw` keeps the untouched payload.
    """
    city_name: str
    current_temp: float
    min_temp: float
    max_temp: float
    humidity_pct: int
    condition_code: str
    raw: Dict[str, Any]

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "WeatherReading":
        main = payload["main"]
        return cls(
            city_name=payload["name"],
            current_temp=main["temp"],
            min_temp=main["temp_min"],
            max_temp=main["temp_max"],
            humidity_pct=main["humidity"],
            condition_code=payload["weather"][0]["main"],
            raw=payload,
        )
