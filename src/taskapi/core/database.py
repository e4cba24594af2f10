"""Async SQLAlchemy database connection manager."""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import ConnectionPoolEntry

from .logging import get_logger

logger = get_logger(__name__)


def _install_sqlite_connect_pragmas(engine: AsyncEngine) -> None:
    """Install SQLite connection pragmas for reliability under concurrent writers."""

    def on_connect(dbapi_conn: sqlite3.Connection, _conn_record: ConnectionPoolEntry) -> None:
        """Configure SQLite pragmas on connection."""
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA busy_timeout=30000;")  # 30s
        cur.close()

    event.listen(engine.sync_engine, "connect", on_connect)


def sqlite_url(storage_path: str) -> str:
    """Build an aiosqlite URL from a filesystem path or ':memory:'."""
    return f"sqlite+aiosqlite:///{storage_path}"


class Database:
    """Async SQLAlchemy database connection manager."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        """Initialize database with connection URL."""
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        _install_sqlite_connect_pragmas(self.engine)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def is_memory(self) -> bool:
        """Whether the database lives only in memory."""
        return ":memory:" in self.url

    async def init(self) -> None:
        """Create tables and configure SQLite journaling."""
        # Import models here so every table is registered on Base.metadata
        from taskapi.modules.task.models import Task  # noqa: F401

        from .models import Base

        if not self.is_memory:
            async with self.engine.begin() as conn:
                await conn.exec_driver_sql("PRAGMA journal_mode=WAL;")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("database.initialized", url=self.url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Create a database session context manager."""
        async with self._session_factory() as s:
            yield s

    async def dispose(self) -> None:
        """Dispose of database engine and connection pool."""
        await self.engine.dispose()
        logger.info("database.disposed", url=self.url)
