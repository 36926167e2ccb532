"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from typing import Any, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.concurrency import run_in_threadpool

from cofound.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _engine_options(database_url: str) -> dict[str, Any]:
    """Return engine keyword arguments suited to ``database_url``.

    Store calls run in a threadpool, so sqlite connections must be shareable
    across threads; in-memory sqlite additionally needs a single static
    connection or every session would see an empty database.
    """

    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``."""

    return create_engine(database_url, **_engine_options(database_url))


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from cofound.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db() -> Generator:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def run_in_session(
    operation: Callable[[Session], T],
    session_factory: Callable[[], Session] | None = None,
) -> T:
    """Run ``operation`` with a short-lived session without blocking the loop.

    Every call is a suspension point: other connection events may interleave
    while the threadpool worker talks to the database.
    """

    factory = session_factory or SessionLocal

    def _run() -> T:
        with factory() as session:
            return operation(session)

    return await run_in_threadpool(_run)


initialize_database()


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "get_db",
    "initialize_database",
    "run_in_session",
]
