"""Feature-specific FastAPI dependency injection for managers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core.api.dependencies import get_request_timeout, get_session
from taskapi.modules.task import TaskManager, TaskRepository


async def get_task_manager(
    session: Annotated[AsyncSession, Depends(get_session)],
    timeout: Annotated[float | None, Depends(get_request_timeout)],
) -> TaskManager:
    """Get a task manager bound to the request's session and deadline."""
    return TaskManager(TaskRepository(session), timeout=timeout)
