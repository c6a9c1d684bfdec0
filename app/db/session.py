"""Database engines and session factory.

Request handlers work with synchronous SQLAlchemy sessions; the async engine
is only used at startup (table creation) and by the SQLAdmin back-office.
When the configured database cannot be reached during local development we
fall back to a SQLite file so the API still boots.
"""

from __future__ import annotations

import logging
import os
from time import perf_counter
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URL = "sqlite+aiosqlite:///./wortschatz_local.db"

# These globals are populated by ``configure_database``.
async_engine: AsyncEngine
sync_engine: Engine
SessionLocal: sessionmaker


def _derive_sync_connection_parameters(async_url: str) -> tuple[str, dict[str, Any]]:
    """Return a synchronous SQLAlchemy URL matching the async configuration."""

    parsed_url: URL = make_url(async_url)
    drivername = parsed_url.drivername
    connect_args: dict[str, Any] = {}

    if drivername.startswith("postgresql+"):
        # ``postgresql+asyncpg`` -> ``postgresql`` so psycopg can be used for sync work.
        parsed_url = parsed_url.set(drivername=drivername.split("+", 1)[0])
    elif drivername == "sqlite+aiosqlite":
        parsed_url = parsed_url.set(drivername="sqlite")
        connect_args["check_same_thread"] = False

    return parsed_url.render_as_string(hide_password=False), connect_args


def _should_enable_sqlite_fallback() -> bool:
    if os.getenv("DISABLE_SQLITE_FALLBACK") == "1":
        return False
    return (settings.ENVIRONMENT or "").lower() in {"development", "local"}


def _install_slow_query_logger(engine: Engine) -> None:
    """Warn when a statement exceeds ``SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS``."""

    threshold_ms = max(settings.SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS or 0, 0)
    if threshold_ms == 0:
        return

    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        context._wortschatz_query_start = perf_counter()

    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start = getattr(context, "_wortschatz_query_start", None)
        if start is None:
            return

        elapsed_ms = (perf_counter() - start) * 1000.0
        if elapsed_ms < threshold_ms:
            return

        snippet = " ".join(str(statement).split())
        if len(snippet) > 200:
            snippet = snippet[:197] + "..."
        logger.warning("Requête SQL lente (%.1f ms) - %s", elapsed_ms, snippet)

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)
    event.listen(engine, "after_cursor_execute", _after_cursor_execute)


def install_sqlite_listeners(engine: Engine) -> None:
    """Clés étrangères et SAVEPOINT (``begin_nested``) sous pysqlite : BEGIN est émis explicitement."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def configure_database(database_url: str | None = None, *, allow_fallback: bool = True) -> None:
    """Initialise the engines and session factory."""

    global async_engine, sync_engine, SessionLocal

    async_url = str(database_url or settings.DATABASE_URL)
    logger.info("Configuration de la base de données: %s", make_url(async_url).render_as_string())

    candidate_async_engine = create_async_engine(async_url, echo=False, future=True)

    sync_url, sync_connect_args = _derive_sync_connection_parameters(async_url)
    candidate_sync_engine = create_engine(
        sync_url,
        pool_pre_ping=True,
        connect_args=sync_connect_args,
    )
    if candidate_sync_engine.dialect.name == "sqlite":
        install_sqlite_listeners(candidate_sync_engine)
    _install_slow_query_logger(candidate_sync_engine)

    try:
        with candidate_sync_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except (OperationalError, OSError) as exc:
        if allow_fallback and _should_enable_sqlite_fallback():
            logger.warning(
                "Impossible de joindre la base de données (%s). Bascule automatique vers SQLite.",
                exc,
            )
            candidate_sync_engine.dispose()
            configure_database(SQLITE_FALLBACK_URL, allow_fallback=False)
            return

        logger.error("Connexion à la base de données échouée: %s", exc)
        raise

    async_engine = candidate_async_engine
    sync_engine = candidate_sync_engine
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sync_engine)


# Initialise the engines at import time so the rest of the application can use
# them immediately.
configure_database()
