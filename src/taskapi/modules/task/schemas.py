"""Task schemas for request bodies and responses."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Ids are SQLite INTEGER, a signed 64-bit value
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class TaskFilter(StrEnum):
    """Selection criterion applied when listing tasks."""

    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @classmethod
    def from_query(cls, raw: str | None) -> TaskFilter:
        """Map the ?complete= query value; anything but true/false lists everything."""
        if raw == "true":
            return cls.COMPLETED
        if raw == "false":
            return cls.INCOMPLETE
        return cls.ALL


class TaskIn(BaseModel):
    """Input schema for creating a task."""

    name: str = Field(min_length=1, description="Short task name")
    description: str = Field(min_length=1, description="What needs to be done")

    model_config = ConfigDict(extra="forbid", strict=True)


class CompleteTaskIn(BaseModel):
    """Input schema for the completion transition."""

    id: int = Field(default=0, ge=INT64_MIN, le=INT64_MAX, description="Task id")
    complete: bool = Field(default=False, description="Must be true")

    model_config = ConfigDict(extra="forbid", strict=True)


class TaskOut(BaseModel):
    """Output schema for task entities."""

    id: int
    name: str
    description: str
    created_at: datetime
    completed_at: datetime | None = None
    complete: bool

    model_config = ConfigDict(from_attributes=True)

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, v: str | None) -> str:
        return v or ""


class TaskResponse(BaseModel):
    """Acknowledgement returned by create, complete and delete."""

    id: int
    name: str
    execution: str

