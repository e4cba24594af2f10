"""FastAPI routers and related presentation logic."""

from taskapi.core.api import BaseServiceBuilder, Router, ServiceInfo
from taskapi.core.api.middleware import add_error_handlers, add_logging_middleware
from taskapi.core.api.utilities import build_location_url, run_app
from taskapi.core.logging import (
    add_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    reset_request_context,
)
from taskapi.modules.task import TaskRouter

from .dependencies import get_task_manager
from .service_builder import DEFAULT_SERVICE_INFO, ServiceBuilder, create_app

__all__ = [
    # Base classes
    "Router",
    # Routers
    "TaskRouter",
    # Dependencies
    "get_task_manager",
    # Middleware
    "add_error_handlers",
    "add_logging_middleware",
    # Logging
    "configure_logging",
    "get_logger",
    "add_request_context",
    "clear_request_context",
    "reset_request_context",
    # Builders
    "BaseServiceBuilder",
    "ServiceBuilder",
    "ServiceInfo",
    "DEFAULT_SERVICE_INFO",
    "create_app",
    # Utilities
    "build_location_url",
    "run_app",
]
