"""Utilities for serving applications."""

from __future__ import annotations

import math

from fastapi import FastAPI, Request

from taskapi.core.logging import get_logger

logger = get_logger(__name__)


def build_location_url(request: Request, path: str) -> str:
    """Build a Location header value relative to the application root."""
    root_path = request.scope.get("root_path", "") or ""
    return f"{root_path.rstrip('/')}{path}"


def run_app(
    app: FastAPI | str,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    timeout_keep_alive: float = 5,
    timeout_graceful_shutdown: float | None = 5,
    reload: bool = False,
) -> None:
    """Serve the application with uvicorn.

    SIGINT/SIGTERM stop accepting new connections and give in-flight requests
    timeout_graceful_shutdown seconds before the lifespan shutdown runs and
    the database handle is disposed.
    """
    import uvicorn

    logger.info(
        "server.starting",
        host=host,
        port=port,
        timeout_keep_alive=timeout_keep_alive,
        timeout_graceful_shutdown=timeout_graceful_shutdown,
    )
    uvicorn.run(
        app,
        host=host,
        port=port,
        reload=reload,
        # uvicorn takes whole seconds; round up so sub-second values keep a grace period
        timeout_keep_alive=max(1, math.ceil(timeout_keep_alive)),
        timeout_graceful_shutdown=(
            math.ceil(timeout_graceful_shutdown) if timeout_graceful_shutdown is not None else None
        ),
        log_config=None,
    )
    logger.info("server.stopped")
