"""FastAPI framework layer - routers, middleware, utilities."""

from .dependencies import get_database, get_request_timeout, get_session
from .middleware import (
    add_error_handlers,
    add_logging_middleware,
    error_response,
    status_for_error,
    task_api_error_handler,
    validation_error_handler,
)
from .router import Router
from .service_builder import BaseServiceBuilder, ServiceInfo
from .utilities import build_location_url, run_app

__all__ = [
    # Base router class
    "Router",
    # Service builder
    "BaseServiceBuilder",
    "ServiceInfo",
    # Dependencies
    "get_database",
    "get_request_timeout",
    "get_session",
    # Middleware
    "add_error_handlers",
    "add_logging_middleware",
    "error_response",
    "status_for_error",
    "task_api_error_handler",
    "validation_error_handler",
    # Utilities
    "build_location_url",
    "run_app",
]
