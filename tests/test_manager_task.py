"""Tests for TaskManager persistence and completion semantics."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

import taskapi.modules.task.repository as repository_module
from taskapi import (
    Database,
    InvalidTimestampError,
    NotFoundError,
    OperationTimeoutError,
    StorageError,
    TaskFilter,
    TaskManager,
    TaskRepository,
)


async def test_create_then_get(manager: TaskManager) -> None:
    """A new task is readable with matching fields and no completion."""
    task_id = await manager.create("Write report", "Quarterly numbers")

    task = await manager.find_by_id(task_id)

    assert task.id == task_id
    assert task.name == "Write report"
    assert task.description == "Quarterly numbers"
    assert task.complete is False
    assert task.completed_at is None
    assert task.created_at.tzinfo is not None


async def test_ids_are_store_assigned_and_increasing(manager: TaskManager) -> None:
    """Ids come from the store and grow with each insert."""
    first = await manager.create("a", "1")
    second = await manager.create("b", "2")

    assert second > first


async def test_store_tolerates_empty_description(manager: TaskManager) -> None:
    """Validation of empty input is the adapter's job, not the store's."""
    task_id = await manager.create("no details", "")

    task = await manager.find_by_id(task_id)
    assert task.description == ""


async def test_get_missing_raises_not_found(manager: TaskManager) -> None:
    """Fetching an unknown id raises NotFoundError."""
    with pytest.raises(NotFoundError) as exc_info:
        await manager.find_by_id(999)

    assert exc_info.value.entity_id == 999
    assert exc_info.value.message == "task not found"


async def test_complete_sets_timestamp(manager: TaskManager) -> None:
    """Completing an incomplete task stamps completed_at."""
    task_id = await manager.create("Buy milk", "2% gallon")

    transitioned = await manager.complete(task_id)

    assert transitioned is True
    task = await manager.find_by_id(task_id)
    assert task.complete is True
    assert task.completed_at is not None


async def test_complete_twice_keeps_first_timestamp(manager: TaskManager, monkeypatch: pytest.MonkeyPatch) -> None:
    """A repeated completion is a no-op and never re-stamps completed_at."""
    task_id = await manager.create("Buy milk", "2% gallon")
    await manager.complete(task_id)
    first = await manager.find_by_id(task_id)

    later = datetime(2099, 1, 1, tzinfo=UTC)
    monkeypatch.setattr(repository_module, "utc_now", lambda: later)

    transitioned = await manager.complete(task_id)

    assert transitioned is False
    second = await manager.find_by_id(task_id)
    assert second.complete is True
    assert second.completed_at == first.completed_at
    assert second.completed_at != later


async def test_complete_missing_raises_not_found(manager: TaskManager) -> None:
    """Completing an unknown id raises NotFoundError."""
    with pytest.raises(NotFoundError):
        await manager.complete(42)


async def test_delete_missing_raises_not_found(manager: TaskManager) -> None:
    """Deleting an unknown id raises NotFoundError."""
    with pytest.raises(NotFoundError):
        await manager.delete(42)


async def test_delete_then_get_raises_not_found(manager: TaskManager) -> None:
    """A deleted task is gone for good."""
    task_id = await manager.create("temp", "remove me")

    await manager.delete(task_id)

    with pytest.raises(NotFoundError):
        await manager.find_by_id(task_id)
    with pytest.raises(NotFoundError):
        await manager.delete(task_id)


async def test_list_empty(manager: TaskManager) -> None:
    """Listing an empty store returns an empty list for every filter."""
    for task_filter in TaskFilter:
        assert await manager.find_all(task_filter) == []


async def test_list_filters_partition_all(manager: TaskManager) -> None:
    """Completed and incomplete listings are disjoint and together equal the full listing."""
    ids = [await manager.create(f"task {i}", f"details {i}") for i in range(6)]
    for task_id in ids[::2]:
        await manager.complete(task_id)

    all_ids = [t.id for t in await manager.find_all()]
    completed = [t.id for t in await manager.find_all(TaskFilter.COMPLETED)]
    incomplete = [t.id for t in await manager.find_all(TaskFilter.INCOMPLETE)]

    assert all_ids == ids
    assert set(completed).isdisjoint(incomplete)
    assert set(completed) | set(incomplete) == set(all_ids)
    assert completed == ids[::2]
    assert incomplete == ids[1::2]


async def test_full_lifecycle_scenario(manager: TaskManager) -> None:
    """Create, complete twice, delete, then the task is not found."""
    task_id = await manager.create("Buy milk", "2% gallon")
    assert task_id == 1

    task = await manager.find_by_id(1)
    assert task.name == "Buy milk"
    assert task.complete is False

    await manager.complete(1)
    done = await manager.find_by_id(1)
    assert done.complete is True
    assert done.completed_at is not None

    await manager.complete(1)
    again = await manager.find_by_id(1)
    assert again.completed_at == done.completed_at

    await manager.delete(1)
    with pytest.raises(NotFoundError):
        await manager.find_by_id(1)


async def test_concurrent_complete_writes_once(tmp_path: Path) -> None:
    """Two simultaneous completions both succeed and exactly one performs the write."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")
    await db.init()
    try:
        async with db.session() as session:
            task_id = await TaskManager(TaskRepository(session)).create("race", "complete me twice")

        async def complete_in_own_session() -> bool:
            async with db.session() as session:
                return await TaskManager(TaskRepository(session)).complete(task_id)

        results = await asyncio.gather(complete_in_own_session(), complete_in_own_session())

        assert sorted(results) == [False, True]
        async with db.session() as session:
            task = await TaskManager(TaskRepository(session)).find_by_id(task_id)
        assert task.complete is True
        assert task.completed_at is not None
    finally:
        await db.dispose()


async def test_malformed_timestamp_is_storage_error(database: Database) -> None:
    """A corrupt persisted timestamp surfaces as StorageError, not NotFound."""
    async with database.session() as session:
        await session.execute(
            text(
                "INSERT INTO tasks (id, name, description, time_of_create, complete) "
                "VALUES (7, 'broken', 'bad row', 'yesterday-ish', 0)"
            )
        )
        await session.commit()

    async with database.session() as session:
        manager = TaskManager(TaskRepository(session))
        with pytest.raises(StorageError) as exc_info:
            await manager.find_by_id(7)

    assert exc_info.value.op == "task.get"
    assert exc_info.value.message == "could not fetch task"
    assert exc_info.value.__cause__ is not None
    assert not isinstance(exc_info.value, NotFoundError)


async def test_invalid_timestamp_error_is_storage_error() -> None:
    """Timestamp parse failures belong to the storage error family."""
    assert issubclass(InvalidTimestampError, StorageError)


async def test_sqlalchemy_error_wrapped_as_storage_error() -> None:
    """Driver failures become StorageError with a stable message and operation name."""
    mock_repo = Mock(spec=TaskRepository)
    mock_repo.add = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))
    manager = TaskManager(mock_repo)

    with pytest.raises(StorageError) as exc_info:
        await manager.create("a", "b")

    assert exc_info.value.message == "could not save task"
    assert exc_info.value.op == "task.create"
    assert isinstance(exc_info.value.__cause__, OperationalError)


async def test_operation_timeout_raises() -> None:
    """An operation exceeding its deadline is abandoned with OperationTimeoutError."""

    async def slow_find_all(**_: object) -> list[object]:
        await asyncio.sleep(5)
        return []

    mock_repo = Mock(spec=TaskRepository)
    mock_repo.find_all = AsyncMock(side_effect=slow_find_all)
    manager = TaskManager(mock_repo, timeout=0.01)

    with pytest.raises(OperationTimeoutError) as exc_info:
        await manager.find_all()

    assert exc_info.value.message == "operation timed out"
    assert exc_info.value.op == "task.list"
    assert isinstance(exc_info.value, StorageError)


async def test_timed_out_write_is_not_committed() -> None:
    """A create that times out before committing never commits."""

    async def slow_add(*_: object, **__: object) -> object:
        await asyncio.sleep(5)
        raise AssertionError("unreachable")

    mock_repo = Mock(spec=TaskRepository)
    mock_repo.add = AsyncMock(side_effect=slow_add)
    mock_repo.commit = AsyncMock()
    manager = TaskManager(mock_repo, timeout=0.01)

    with pytest.raises(OperationTimeoutError):
        await manager.create("a", "b")

    mock_repo.commit.assert_not_called()


async def test_empty_creation_timestamp_is_storage_error(database: Database) -> None:
    """An empty value in the NOT NULL creation column is a malformed timestamp."""
    async with database.session() as session:
        await session.execute(
            text(
                "INSERT INTO tasks (id, name, description, time_of_create, complete) "
                "VALUES (8, 'blank', 'no timestamp', '', 0)"
            )
        )
        await session.commit()

    async with database.session() as session:
        manager = TaskManager(TaskRepository(session))
        with pytest.raises(StorageError) as exc_info:
            await manager.find_by_id(8)
        with pytest.raises(StorageError) as list_exc_info:
            await manager.find_all()

    assert exc_info.value.message == "could not fetch task"
    assert exc_info.value.op == "task.get"
    assert list_exc_info.value.op == "task.list"
