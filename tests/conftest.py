"""Test configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskapi import Database, TaskManager, TaskRepository
from taskapi.api import ServiceBuilder, ServiceInfo


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create and initialize in-memory database for testing."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
async def manager(database: Database) -> AsyncGenerator[TaskManager, None]:
    """Create task manager bound to a session of the in-memory database."""
    async with database.session() as session:
        yield TaskManager(TaskRepository(session))


@pytest.fixture
def app() -> FastAPI:
    """Task service app backed by an in-memory database."""
    return (
        ServiceBuilder(info=ServiceInfo(display_name="Test Task Service"))
        .with_tasks()
        .build()
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create FastAPI TestClient for testing with lifespan context."""
    with TestClient(app) as test_client:
        yield test_client
