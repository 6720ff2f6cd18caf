"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Awaitable
from typing import Any, TypeVar

from sqlalchemy import event
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from skillbuilder.config import get_settings
from skillbuilder.errors import ConflictError, StoreError, StoreTimeoutError

T = TypeVar("T")

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _sqlite_pragmas(dbapi_connection: Any, _record: Any) -> None:  # noqa: ANN401
    """Enforce FK cascades and case-sensitive LIKE on every SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


async def init_db(url: str) -> None:
    """Initialize the database engine and session factory."""
    global _engine, _session_factory  # noqa: PLW0603
    if url.startswith("sqlite"):
        _engine = create_async_engine(url, echo=False)
        event.listen(_engine.sync_engine, "connect", _sqlite_pragmas)
    else:
        _engine = create_async_engine(
            url,
            pool_size=20,
            max_overflow=10,
            pool_pre_ping=True,
            echo=False,
            connect_args={"statement_cache_size": 0},
        )
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def close_db() -> None:
    """Dispose of the database engine."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_engine() -> AsyncEngine:
    """Get the async engine instance."""
    if _engine is None:
        msg = "Database not initialized. Call init_db() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory (for code running outside a request)."""
    if _session_factory is None:
        msg = "Database not initialized. Call init_db() first."
        raise RuntimeError(msg)
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session (FastAPI dependency).

    Anything left uncommitted when the request fails is rolled back.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def insert_for(db: AsyncSession, model: Any) -> Any:  # noqa: ANN401
    """Dialect-specific INSERT supporting ON CONFLICT clauses."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    msg = f"upsert not supported on dialect {dialect!r}"
    raise StoreError("insert", reason=msg)


async def bounded(
    awaitable: Awaitable[T],
    *,
    op: str,
    entity_id: str | None = None,
    timeout: float | None = None,
) -> T:
    """Await a store operation under a deadline.

    Raises:
        StoreTimeoutError: the deadline passed before the operation finished.
        ConflictError: a uniqueness or integrity constraint rejected the write.
        StoreError: any other SQLAlchemy failure.
    """
    deadline = timeout if timeout is not None else get_settings().db_timeout_seconds
    try:
        return await asyncio.wait_for(awaitable, timeout=deadline)
    except asyncio.TimeoutError as e:
        raise StoreTimeoutError(op, entity_id, deadline) from e
    except IntegrityError as e:
        msg = f"{op} violates a constraint"
        raise ConflictError(msg) from e
    except SQLAlchemyError as e:
        raise StoreError(op, entity_id, type(e).__name__) from e
