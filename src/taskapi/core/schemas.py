"""Shared response schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    message: str = Field(description="Stable, client-safe error message")
    time: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the error occurred")
