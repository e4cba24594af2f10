"""Base service builder for FastAPI applications without module dependencies."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Awaitable, Callable, Dict, List, Self

from fastapi import APIRouter, FastAPI
from pydantic import BaseModel, ConfigDict

from taskapi.core import Database
from taskapi.core.logging import configure_logging, get_logger

from .middleware import add_error_handlers, add_logging_middleware

logger = get_logger(__name__)


class ServiceInfo(BaseModel):
    """Service metadata for FastAPI application."""

    display_name: str
    version: str = "1.0.0"
    summary: str | None = None
    description: str | None = None

    model_config = ConfigDict(extra="forbid")


class BaseServiceBuilder:
    """Base service builder providing core FastAPI functionality without module dependencies."""

    def __init__(
        self,
        *,
        info: ServiceInfo,
        database_url: str = "sqlite+aiosqlite:///:memory:",
        include_error_handlers: bool = True,
        include_logging: bool = False,
    ) -> None:
        """Initialize base service builder with core options."""
        self.info = info
        self._database_url = database_url
        self._database_instance: Database | None = None
        self._include_error_handlers = include_error_handlers
        self._include_logging = include_logging
        self._log_level = "INFO"
        self._json_logs = True
        self._request_timeout: float | None = None
        self._custom_routers: List[APIRouter] = []
        self._dependency_overrides: Dict[Callable[..., object], Callable[..., object]] = {}
        self._startup_hooks: List[Callable[[FastAPI], Awaitable[None]]] = []
        self._shutdown_hooks: List[Callable[[FastAPI], Awaitable[None]]] = []

    # --------------------------------------------------------------------- Fluent configuration

    def with_database(self, url: str) -> Self:
        """Configure database URL."""
        self._database_url = url
        return self

    def with_database_instance(self, database: Database) -> Self:
        """Inject a pre-configured database instance (the caller owns its lifecycle)."""
        self._database_instance = database
        return self

    def with_logging(self, enabled: bool = True, *, level: str = "INFO", json_output: bool = True) -> Self:
        """Enable structured logging with request tracing."""
        self._include_logging = enabled
        self._log_level = level
        self._json_logs = json_output
        return self

    def with_request_timeout(self, seconds: float | None) -> Self:
        """Bound every store operation made while serving a request."""
        if seconds is not None and seconds <= 0:
            raise ValueError("Request timeout must be positive")
        self._request_timeout = seconds
        return self

    def include_router(self, router: APIRouter) -> Self:
        """Include a custom router."""
        self._custom_routers.append(router)
        return self

    def override_dependency(self, dependency: Callable[..., object], override: Callable[..., object]) -> Self:
        """Override a dependency for testing or customization."""
        self._dependency_overrides[dependency] = override
        return self

    def on_startup(self, hook: Callable[[FastAPI], Awaitable[None]]) -> Self:
        """Register a startup hook."""
        self._startup_hooks.append(hook)
        return self

    def on_shutdown(self, hook: Callable[[FastAPI], Awaitable[None]]) -> Self:
        """Register a shutdown hook."""
        self._shutdown_hooks.append(hook)
        return self

    # --------------------------------------------------------------------- Build mechanics

    def build(self) -> FastAPI:
        """Build and configure the FastAPI application."""
        app = FastAPI(
            title=self.info.display_name,
            description=self.info.summary or self.info.description or "",
            version=self.info.version,
            lifespan=self._build_lifespan(),
        )
        app.state.database_url = self._database_url
        app.state.database = None
        app.state.request_timeout = self._request_timeout

        if self._include_error_handlers:
            add_error_handlers(app)

        if self._include_logging:
            add_logging_middleware(app)

        # Extension point for module-specific routers
        self._register_module_routers(app)

        for router in self._custom_routers:
            app.include_router(router)

        for dependency, override in self._dependency_overrides.items():
            app.dependency_overrides[dependency] = override

        return app

    # --------------------------------------------------------------------- Extension points

    def _register_module_routers(self, app: FastAPI) -> None:
        """Extension point for registering module-specific routers (override in subclasses)."""
        pass

    # --------------------------------------------------------------------- Core helpers

    def _build_lifespan(self) -> Callable[[FastAPI], AsyncContextManager[None]]:
        """Build lifespan context manager owning the database handle."""
        database_url = self._database_url
        database_instance = self._database_instance
        include_logging = self._include_logging
        log_level = self._log_level
        json_logs = self._json_logs
        startup_hooks = list(self._startup_hooks)
        shutdown_hooks = list(self._shutdown_hooks)

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncIterator[None]:
            if include_logging:
                configure_logging(level=log_level, json_output=json_logs)

            # Use injected database or create new one from URL
            if database_instance is not None:
                database = database_instance
                should_manage_lifecycle = False
            else:
                database = Database(database_url)
                should_manage_lifecycle = True

            await database.init()
            app.state.database = database
            logger.info("service.started", service=app.title, version=app.version)

            for hook in startup_hooks:
                await hook(app)
            try:
                yield
            finally:
                for hook in shutdown_hooks:
                    await hook(app)
                app.state.database = None

                # Dispose database only if we created it
                if should_manage_lifecycle:
                    await database.dispose()
                logger.info("service.stopped", service=app.title)

        return lifespan

    # --------------------------------------------------------------------- Convenience

    @classmethod
    def create(cls, *, info: ServiceInfo, **kwargs: object) -> FastAPI:
        """Create and build a FastAPI application in one call."""
        return cls(info=info, **kwargs).build()  # type: ignore[arg-type]
