# src/ratetick/adapters/persistence/db.py
"""
Database Wiring - SQLAlchemy Engine, Sessions and Schema

This module owns the declarative Base, builds the engine from settings and
exposes a session factory. Schema creation is a plain CREATE TABLE IF NOT
EXISTS; versioned migrations are handled outside this project.

Files that USE this module:
- ratetick.adapters.persistence.models (declarative Base)
- ratetick.app (engine, session factory and schema creation at startup)
- tests.conftest (in-memory engine fixtures)

Files that this module USES:
- ratetick.config (settings for database URL and echo flag)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from ratetick.config import settings
from ratetick.domain.errors import PersistenceError

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_settings(url: Optional[str] = None, echo: Optional[bool] = None, **kwargs) -> Engine:
    """
    Create the SQLAlchemy engine.

    Args:
        url: Database URL (defaults to settings.database_url)
        echo: Log SQL statements (defaults to settings.database_echo)
        **kwargs: Extra arguments passed to sqlalchemy.create_engine

    Returns:
        Engine; SQLite engines get foreign key enforcement switched on
    """
    url = url or settings.database_url
    echo = settings.database_echo if echo is None else echo
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=echo, **kwargs)

    if parsed.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    log.info("Database engine created: %s", parsed.render_as_string(hide_password=True))
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory; objects stay readable after commit so views can be built from them."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create the currencies and exchange_rate_ticks tables if they do not exist."""
    # Register the mapped classes on Base.metadata
    from ratetick.adapters.persistence import models  # noqa: F401

    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to create schema: {e.__class__.__name__}") from e
    log.info("Database schema ensured (%d tables)", len(Base.metadata.tables))
