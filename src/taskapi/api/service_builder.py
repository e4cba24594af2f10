"""Service builder with task module integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Self

from fastapi import FastAPI

from taskapi.core import Settings, sqlite_url
from taskapi.core.api.service_builder import BaseServiceBuilder, ServiceInfo
from taskapi.modules.task import TaskRouter

from .dependencies import get_task_manager


@dataclass(slots=True)
class _TaskOptions:
    """Internal task options for ServiceBuilder."""

    prefix: str = "/tasks"
    tags: List[str] = field(default_factory=lambda: ["Tasks"])


class ServiceBuilder(BaseServiceBuilder):
    """Service builder with integrated task module support."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize service builder with core and module options."""
        super().__init__(**kwargs)
        self._task_options: _TaskOptions | None = None

    def with_tasks(self, *, prefix: str = "/tasks", tags: List[str] | None = None) -> Self:
        """Enable task endpoints."""
        self._task_options = _TaskOptions(prefix=prefix, tags=list(tags) if tags else ["Tasks"])
        return self

    def _register_module_routers(self, app: FastAPI) -> None:
        """Register module-specific routers."""
        if self._task_options:
            task_options = self._task_options
            task_router = TaskRouter.create(
                prefix=task_options.prefix,
                tags=task_options.tags,
                manager_factory=get_task_manager,
            )
            app.include_router(task_router)


DEFAULT_SERVICE_INFO = ServiceInfo(
    display_name="Task API",
    summary="Create, fetch, complete, list and delete tasks",
)


def create_app(settings: Settings, *, info: ServiceInfo | None = None) -> FastAPI:
    """Build the task service application from settings."""
    return (
        ServiceBuilder(info=info or DEFAULT_SERVICE_INFO)
        .with_database(sqlite_url(settings.storage_path))
        .with_logging(level=settings.log_level, json_output=settings.json_logs)
        .with_request_timeout(settings.http_server.timeout.total_seconds())
        .with_tasks()
        .build()
    )
