"""
Async database manager for pool records.

Postgres (asyncpg) in production, sqlite (aiosqlite) for local runs and tests.
Statements must be SQLAlchemy constructs; raw SQL strings are refused.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import Result, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.elements import ClauseElement

from .schema import metadata

_SQLITE_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA foreign_keys=ON")


def _apply_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    # Per-connection settings; reapplied on every connect
    cursor = dbapi_connection.cursor()
    try:
        for pragma in _SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def _require_construct(query: Any) -> None:
    if isinstance(query, str):
        raise TypeError("Raw SQL strings are disallowed. Use sqlalchemy.text().")
    if not isinstance(query, ClauseElement):
        raise TypeError("Query must be a SQLAlchemy TextClause or ClauseElement.")


class DBM:
    """Engine and session owner for one pool database.

    Args:
        url: SQLAlchemy async URL
        echo: Log every statement
        pool_size: Connection pool size (ignored for sqlite)
    """

    def __init__(self, url: str, *, echo: bool = False, pool_size: int | None = None):
        self.url = url
        self.is_sqlite = make_url(url).get_backend_name() == "sqlite"

        engine_kwargs: dict[str, Any] = {"echo": echo}
        if pool_size is not None and not self.is_sqlite:
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["pool_pre_ping"] = True
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _apply_sqlite_pragmas)

        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "DBM":
        return cls(settings.resolved_database_url(), echo=settings.database.echo)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            yield session

    async def create_all(self) -> None:
        """Create any missing pool tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def read(self, query: Any, params: dict | None = None) -> list[Any]:
        """Run a select and return every row as a mapping."""
        _require_construct(query)
        async with self.session() as session:
            result: Result = await session.execute(query, params or {})
            return list(result.mappings().all())

    async def scalar(self, query: Any, params: dict | None = None) -> Any:
        """Run a select and return the first column of the first row, or None."""
        _require_construct(query)
        async with self.session() as session:
            result: Result = await session.execute(query, params or {})
            return result.scalar()

    async def write(self, query: Any, params: dict | None = None) -> int:
        """Run one parameterized write in its own transaction; returns rowcount."""
        _require_construct(query)
        if not params:
            raise ValueError("Parameterized writes are required. Provide a params mapping.")

        async with self.session() as session:
            async with session.begin():
                result: Result = await session.execute(query, params)
                return result.rowcount or 0

    async def dispose(self) -> None:
        await self.engine.dispose()


__all__ = ["DBM"]
