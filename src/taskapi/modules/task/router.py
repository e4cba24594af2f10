"""Task router translating HTTP requests into store operations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any

from fastapi import Depends, Path, Query, Request, Response, status

from taskapi.core.api.router import Router
from taskapi.core.api.utilities import build_location_url
from taskapi.core.exceptions import ValidationError
from taskapi.core.schemas import ErrorResponse

from .manager import TaskManager
from .schemas import INT64_MAX, INT64_MIN, CompleteTaskIn, TaskFilter, TaskIn, TaskOut, TaskResponse

EXECUTION_CREATED = "OK"
EXECUTION_COMPLETED = "complete status is OK"
EXECUTION_DELETED = "delete status is OK"

TaskId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX, description="Task id")]

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    status.HTTP_504_GATEWAY_TIMEOUT: {"model": ErrorResponse},
}


class TaskRouter(Router):
    """Router for Task create, fetch, list, complete and delete."""

    def __init__(
        self,
        prefix: str,
        tags: Sequence[str],
        manager_factory: Any,
        **kwargs: Any,
    ) -> None:
        """Initialize task router with a manager dependency factory."""
        self.manager_factory = manager_factory
        super().__init__(prefix=prefix, tags=tags, responses=_ERROR_RESPONSES, **kwargs)

    def _register_routes(self) -> None:
        """Register task routes."""
        manager_factory = self.manager_factory
        prefix = self.router.prefix

        @self.router.post(
            "",
            status_code=status.HTTP_201_CREATED,
            response_model=TaskResponse,
            summary="Create task",
        )
        async def create_task(
            data: TaskIn,
            request: Request,
            response: Response,
            manager: TaskManager = Depends(manager_factory),
        ) -> TaskResponse:
            task_id = await manager.create(data.name, data.description)
            response.headers["Location"] = build_location_url(request, f"{prefix}/{task_id}")
            return TaskResponse(id=task_id, name=data.name, execution=EXECUTION_CREATED)

        @self.router.get(
            "/{task_id}",
            response_model=TaskOut,
            summary="Get task by id",
        )
        async def get_task(
            task_id: TaskId,
            manager: TaskManager = Depends(manager_factory),
        ) -> TaskOut:
            return await manager.find_by_id(task_id)

        @self.router.get(
            "",
            response_model=list[TaskOut],
            summary="List tasks",
            description="List all tasks, or only completed (?complete=true) or incomplete (?complete=false) ones",
        )
        async def list_tasks(
            complete: str | None = Query(default=None, description="'true' or 'false' to filter"),
            manager: TaskManager = Depends(manager_factory),
        ) -> list[TaskOut]:
            return await manager.find_all(TaskFilter.from_query(complete))

        @self.router.patch(
            "",
            response_model=TaskResponse,
            summary="Complete task",
        )
        async def complete_task(
            data: CompleteTaskIn,
            manager: TaskManager = Depends(manager_factory),
        ) -> TaskResponse:
            if data.id == 0:
                raise ValidationError("invalid id")
            if not data.complete:
                raise ValidationError("complete must be true")

            task = await manager.find_by_id(data.id)
            await manager.complete(data.id)
            return TaskResponse(id=data.id, name=task.name, execution=EXECUTION_COMPLETED)

        @self.router.delete(
            "/{task_id}",
            response_model=TaskResponse,
            summary="Delete task",
        )
        async def delete_task(
            task_id: TaskId,
            manager: TaskManager = Depends(manager_factory),
        ) -> TaskResponse:
            task = await manager.find_by_id(task_id)
            await manager.delete(task_id)
            return TaskResponse(id=task_id, name=task.name, execution=EXECUTION_DELETED)
