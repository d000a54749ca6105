"""
FastAPI entrypoint.

This file focuses on:
- app lifecycle (database + HTTP clients built at startup, torn down on shutdown)
- the history recorder endpoint
- the server-rendered weather page driven by the view-model

Run with:  uvicorn clima.main:app --port 3001
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .db import Database, get_db
from .logging_setup import configure_logging
from .schemas import HistoryAck, HistoryCreate, HistoryFailure
from .settings import Settings, get_settings
from .view_model import HistoryRecorder, WeatherViewModel
from .weather_clients import HistoryClient, OpenWeatherClient

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

NAV_CITIES = ("Salta", "Tucuman", "Argentina")
SAVED_MESSAGE = "Ciudad guardada en el historial"
SERVER_ERROR_MESSAGE = "Error interno del servidor"

router = APIRouter()


def get_view_model(request: Request) -> WeatherViewModel:
    """A fresh view-model per request, sharing the app-scoped clients."""
    state = request.app.state
    return WeatherViewModel(state.weather, state.recorder, state.settings.default_city)


# -------------------------
# History recorder
# -------------------------

@router.post(
    "/HistorialCiudades",
    status_code=201,
    response_model=HistoryAck,
    responses={500: {"model": HistoryFailure}},
)
def guardar_ciudad(payload: Optional[HistoryCreate] = None, db: Session = Depends(get_db)):
    """Append the queried city to the history. No validation, no dedup."""
    ciudad = payload.ciudad if payload is not None else None
    try:
        crud.record_city(db, ciudad)
    except SQLAlchemyError:
        logger.exception("Error al guardar ciudad en historial: %r", ciudad)
        return JSONResponse(status_code=500, content={"error": SERVER_ERROR_MESSAGE})
    return HistoryAck(mensaje=SAVED_MESSAGE)


# -------------------------
# UI routes
# -------------------------

@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    ciudad: Optional[str] = Query(None, max_length=255),
    vm: WeatherViewModel = Depends(get_view_model),
):
    """Header nav + search bar + weather card (or the not-found message)."""
    if ciudad is not None:
        await vm.set_city(ciudad)
    else:
        await vm.fetch_weather()

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": request.app.state.settings.app_name,
            "nav_cities": NAV_CITIES,
            "vm": vm,
            "state": vm.state,
        },
    )


@router.get("/api/clima")
async def api_clima(
    ciudad: Optional[str] = Query(None, max_length=255),
    vm: WeatherViewModel = Depends(get_view_model),
):
    """Same lookup as the page, returned as the view state."""
    if ciudad is not None:
        await vm.set_city(ciudad)
    else:
        await vm.fetch_weather()
    return vm.to_dict()


def create_app(
    settings: Optional[Settings] = None,
    weather_transport: Optional[httpx.AsyncBaseTransport] = None,
    history_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application. The transports exist so tests can stand in for
    OpenWeather and the history endpoint.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)

        database = Database(settings.database_url)
        database.create_all()

        app.state.settings = settings
        app.state.database = database
        app.state.weather = OpenWeatherClient(
            settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            lang=settings.weather_lang,
            units=settings.weather_units,
            timeout_s=settings.http_timeout_s,
            transport=weather_transport,
        )
        app.state.recorder = HistoryRecorder(
            HistoryClient(settings.history_url, timeout_s=settings.http_timeout_s, transport=history_transport)
        )
        try:
            yield
        finally:
            try:
                await app.state.recorder.aclose()
            finally:
                database.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.include_router(router)
    return app


app = create_app()
