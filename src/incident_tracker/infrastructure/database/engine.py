"""Process-scoped SQLAlchemy engine management."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ...config import Settings, get_logger
from ...core.exceptions import DatabaseNotInitializedError
from .schema import init_schema

logger = get_logger("database.engine")


def build_engine(database_url: str, echo: bool = False, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """
    Create an engine with a connection pool suited to the backend.

    In-memory SQLite gets a single shared connection so every thread sees the
    same database; file-backed SQLite and server databases get a regular pool.
    """
    kwargs: dict[str, Any] = {"echo": echo}

    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_pre_ping=True, pool_size=pool_size, max_overflow=max_overflow)

    engine = create_engine(database_url, **kwargs)
    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _register_unicode_lower)
    return engine


def _register_unicode_lower(dbapi_conn, connection_record) -> None:
    """SQLite's built-in lower() folds ASCII only, which breaks ILIKE on accented text."""
    dbapi_conn.create_function("lower", 1, _lower, deterministic=True)


def _lower(value):
    return value.lower() if isinstance(value, str) else value


class DatabaseManager:
    """Lazily creates the engine, initializes the schema and disposes of the pool."""

    def __init__(self) -> None:
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseNotInitializedError("Database manager has not been initialized")
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self, settings: Settings) -> Engine:
        """Create the engine once and make sure the schema exists."""
        if self._engine is None:
            logger.info("Initializing database engine", backend=settings.database_url.split(":", 1)[0])
            self._engine = build_engine(
                settings.database_url,
                echo=settings.database_echo,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
        init_schema(self._engine)
        return self._engine

    def ping(self) -> bool:
        """Run a trivial statement to check connectivity."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, DatabaseNotInitializedError) as e:
            logger.warning("Database ping failed", error=str(e))
            return False

    def close(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            logger.info("Closing database connections")
            self._engine.dispose()
            self._engine = None


# Singleton instance shared by every request
database_manager = DatabaseManager()
