from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized configuration.

    Loaded from:
    - environment variables
    - .env file (if present)
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Required key (the app should fail fast if missing)
    openweather_api_key: str

    openweather_base_url: str = "https://api.openweathermap.org"
    weather_lang: str = "es"
    weather_units: str = "metric"
    http_timeout_s: float = 10.0

    # City shown before the user picks one
    default_city: str = "Tucuman"

    # Where the view-model posts each successful lookup
    history_url: str = "http://localhost:3001/HistorialCiudades"

    database_url: str = "sqlite:///historial_ciudades.sqlite3"

    app_name: str = "Clima"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
