"""Task manager implementing the persistence and completion contract."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from taskapi.core.exceptions import NotFoundError, OperationTimeoutError, StorageError
from taskapi.core.logging import get_logger

from .repository import TaskRepository
from .schemas import TaskFilter, TaskOut

logger = get_logger(__name__)

MSG_SAVE_ERROR = "could not save task"
MSG_SELECT_ERROR = "could not fetch task"
MSG_LIST_ERROR = "database error"
MSG_UPDATE_ERROR = "could not update task"
MSG_DELETE_ERROR = "could not delete task"


class TaskManager:
    """Manager for Task entities with idempotent, one-way completion.

    Every operation runs under an optional deadline. When it expires the
    in-flight statement is abandoned and OperationTimeoutError is raised;
    nothing is committed, so a write is never partially applied.
    """

    def __init__(self, repo: TaskRepository, *, timeout: float | None = None) -> None:
        """Initialize task manager with repository and per-operation deadline in seconds."""
        self.repo = repo
        self.timeout = timeout

    @asynccontextmanager
    async def _guard(self, op: str, message: str) -> AsyncIterator[None]:
        """Apply the deadline and translate persistence failures into StorageError."""
        try:
            async with asyncio.timeout(self.timeout):
                yield
        except TimeoutError as exc:
            logger.error("task.timeout", op=op, timeout=self.timeout)
            raise OperationTimeoutError(op=op) from exc
        except (StorageError, SQLAlchemyError, PydanticValidationError) as exc:
            logger.error("task.storage_error", op=op, error=str(exc))
            raise StorageError(message, op=op) from exc

    async def create(self, name: str, description: str) -> int:
        """Persist a new incomplete task and return its store-assigned id."""
        async with self._guard("task.create", MSG_SAVE_ERROR):
            task = await self.repo.add(name, description)
            task_id = task.id
            await self.repo.commit()

        logger.info("task.created", task_id=task_id)
        return task_id

    async def find_by_id(self, id: int) -> TaskOut:
        """Fetch a task or raise NotFoundError."""
        async with self._guard("task.get", MSG_SELECT_ERROR):
            task = await self.repo.find_by_id(id)
            if task is None:
                raise NotFoundError(id)
            return TaskOut.model_validate(task)

    async def find_all(self, task_filter: TaskFilter = TaskFilter.ALL) -> list[TaskOut]:
        """List tasks matching the filter; empty list when nothing matches."""
        async with self._guard("task.list", MSG_LIST_ERROR):
            tasks = await self.repo.find_all(task_filter=task_filter)
            return [TaskOut.model_validate(task) for task in tasks]

    async def complete(self, id: int) -> bool:
        """Mark a task complete.

        Returns True when this call performed the transition and False when the
        task was already complete (a no-op that keeps the original timestamp).
        Raises NotFoundError when no task has this id.
        """
        async with self._guard("task.complete", MSG_UPDATE_ERROR):
            transitioned = await self.repo.mark_complete(id)
            if not transitioned:
                # Zero rows: either already complete or missing
                found = await self.repo.exists_by_id(id)
                await self.repo.commit()
                if not found:
                    raise NotFoundError(id)
            else:
                await self.repo.commit()

        logger.info("task.completed", task_id=id, transitioned=transitioned)
        return transitioned

    async def delete(self, id: int) -> None:
        """Permanently remove a task or raise NotFoundError."""
        async with self._guard("task.delete", MSG_DELETE_ERROR):
            removed = await self.repo.delete_by_id(id)
            if not removed:
                await self.repo.rollback()
                raise NotFoundError(id)
            await self.repo.commit()

        logger.info("task.deleted", task_id=id)
