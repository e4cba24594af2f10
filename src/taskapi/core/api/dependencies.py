"""Generic FastAPI dependency injection for the database handle."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core import Database


def get_database(request: Request) -> Database:
    """Get the database instance owned by the running application."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized. The application lifespan must run before serving requests.")
    return database


def get_request_timeout(request: Request) -> float | None:
    """Get the per-request store deadline in seconds, if configured."""
    return getattr(request.app.state, "request_timeout", None)


async def get_session(db: Annotated[Database, Depends(get_database)]) -> AsyncIterator[AsyncSession]:
    """Get a database session for dependency injection."""
    async with db.session() as session:
        yield session
