"""Task repository for database access and querying."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from sqlalchemy import CursorResult, delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core.types import utc_now

from .models import Task
from .schemas import TaskFilter


class TaskRepository:
    """Repository for Task entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository with database session."""
        self.s = session
        self.model = Task

    async def add(self, name: str, description: str, *, created_at: datetime | None = None) -> Task:
        """Stage a new incomplete task and flush it to obtain its id."""
        task = Task(
            name=name,
            description=description,
            created_at=created_at or utc_now(),
            completed_at=None,
            complete=False,
        )
        self.s.add(task)
        await self.s.flush()
        return task

    async def find_by_id(self, id: int) -> Task | None:
        """Find a task by id, always reading the current row."""
        stmt = select(Task).where(Task.id == id).execution_options(populate_existing=True)
        result = await self.s.scalars(stmt)
        return result.one_or_none()

    async def find_all(self, *, task_filter: TaskFilter = TaskFilter.ALL) -> list[Task]:
        """Find all tasks matching the filter in insertion order."""
        stmt = select(Task).order_by(Task.id).execution_options(populate_existing=True)
        if task_filter is TaskFilter.COMPLETED:
            stmt = stmt.where(Task.complete.is_(True))
        elif task_filter is TaskFilter.INCOMPLETE:
            stmt = stmt.where(Task.complete.is_(False))
        result = await self.s.scalars(stmt)
        return list(result.all())

    async def exists_by_id(self, id: int) -> bool:
        """Check whether a task with this id exists."""
        result = await self.s.scalar(select(exists().where(Task.id == id)))
        return bool(result)

    async def mark_complete(self, id: int, *, completed_at: datetime | None = None) -> bool:
        """Conditionally stamp an incomplete task; True if a row was transitioned."""
        stmt = (
            update(Task)
            .where(Task.id == id, Task.complete.is_(False))
            .values(complete=True, completed_at=completed_at or utc_now())
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult[Any], await self.s.execute(stmt))
        return result.rowcount > 0

    async def delete_by_id(self, id: int) -> bool:
        """Delete a task; True if a row was removed."""
        stmt = delete(Task).where(Task.id == id).execution_options(synchronize_session=False)
        result = cast(CursorResult[Any], await self.s.execute(stmt))
        return result.rowcount > 0

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.s.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self.s.rollback()
