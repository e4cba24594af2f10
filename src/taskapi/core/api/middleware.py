"""Error handlers and request logging middleware."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from ulid import ULID

from taskapi.core.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    StorageError,
    TaskAPIError,
    ValidationError,
)
from taskapi.core.logging import add_request_context, clear_request_context, get_logger
from taskapi.core.schemas import ErrorResponse

logger = get_logger(__name__)

MSG_INVALID_JSON = "invalid JSON"
MSG_INVALID_REQUEST = "invalid request body"
MSG_INVALID_ID = "invalid id"
MSG_FIELD_VALIDATION = "field validation failed"
MSG_INTERNAL = "internal server error"

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(status_code: int, message: str, *, headers: dict[str, str] | None = None) -> JSONResponse:
    """Build the standard {message, time} error response."""
    body = ErrorResponse(message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def _log_failure(request: Request, status_code: int, message: str, error: object | None) -> None:
    fields: dict[str, Any] = {"status": status_code, "message": message, "path": request.url.path}
    if error is not None:
        fields["error"] = str(error)
    logger.error("request.failed", **fields)


# Body values of the wrong JSON type or outside the id range cannot be decoded
_UNDECODABLE_BODY_ERRORS = frozenset(
    {"int_type", "bool_type", "string_type", "less_than_equal", "greater_than_equal"}
)
_NOT_AN_OBJECT_ERRORS = frozenset({"model_attributes_type", "model_type", "dict_type"})


def _message_for_validation_errors(errors: Sequence[Any]) -> str:
    """Pick a stable client message for FastAPI request validation errors."""
    types = {err.get("type") for err in errors}
    locations = {err.get("loc", ("",))[0] for err in errors}
    body_types = {err.get("type") for err in errors if err.get("loc", ("",))[0] == "body"}

    if "json_invalid" in types:
        return MSG_INVALID_JSON
    if "path" in locations:
        return MSG_INVALID_ID
    if body_types & _UNDECODABLE_BODY_ERRORS:
        return MSG_INVALID_JSON
    if "extra_forbidden" in types or types & _NOT_AN_OBJECT_ERRORS:
        return MSG_INVALID_REQUEST
    if any(err.get("loc") == ("body",) for err in errors):
        return MSG_INVALID_REQUEST
    return MSG_FIELD_VALIDATION


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Map request validation failures to 400 with a stable message."""
    if not isinstance(exc, RequestValidationError):
        raise exc
    message = _message_for_validation_errors(exc.errors())
    _log_failure(request, status.HTTP_400_BAD_REQUEST, message, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, message)


def status_for_error(exc: TaskAPIError) -> int:
    """Map an error kind to its HTTP status code."""
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, OperationTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def task_api_error_handler(request: Request, exc: Exception) -> Response:
    """Map store and adapter errors to their status codes."""
    if not isinstance(exc, TaskAPIError):
        raise exc
    status_code = status_for_error(exc)
    cause = exc.__cause__ if isinstance(exc, StorageError) and exc.__cause__ is not None else exc
    _log_failure(request, status_code, exc.message, cause)
    return error_response(status_code, exc.message)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    """Never leak internal error strings to clients."""
    logger.exception("request.unhandled", path=request.url.path, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL)


def add_error_handlers(app: FastAPI) -> None:
    """Install exception handlers producing the standard error body."""
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(TaskAPIError, task_api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def add_logging_middleware(app: FastAPI) -> None:
    """Bind a request id into the logging context and log each request."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(ULID())
        add_request_context(request_id=request_id, method=request.method, path=request.url.path)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info("http.request", status=response.status_code, duration_ms=duration_ms)
            return response
        finally:
            clear_request_context()
