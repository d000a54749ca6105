"""
Database configuration for SQLAlchemy.

The engine is owned by a `Database` object built once at startup and
disposed on shutdown; requests borrow a session from it.
"""

import logging

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for ORM models."""
    pass


class Database:
    """Engine + session factory with an explicit init/teardown lifecycle."""

    def __init__(self, url: str):
        self.url = url
        connect_args = {}
        engine_kwargs = {}
        if url.startswith("sqlite"):
            # SQLite needs check_same_thread=False because FastAPI runs sync deps in threads.
            connect_args["check_same_thread"] = False
            if ":memory:" in url or url == "sqlite://":
                # One shared connection, otherwise every session sees an empty database.
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection closed")


def get_db(request: Request):
    """
    FastAPI dependency that yields a DB session per request,
    then closes it cleanly afterwards.
    """
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
