"""Error taxonomy shared by the store and the HTTP adapter."""

from __future__ import annotations


class TaskAPIError(Exception):
    """Base error carrying a stable, client-safe message."""

    default_message = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskAPIError):
    """Malformed or missing client input, rejected before reaching the store."""

    default_message = "field validation failed"


class NotFoundError(TaskAPIError):
    """No record matches the requested id."""

    default_message = "task not found"

    def __init__(self, entity_id: int | None = None, message: str | None = None) -> None:
        self.entity_id = entity_id
        super().__init__(message)


class StorageError(TaskAPIError):
    """Underlying persistence failure."""

    default_message = "database error"

    def __init__(self, message: str | None = None, *, op: str | None = None) -> None:
        self.op = op
        super().__init__(message)


class InvalidTimestampError(StorageError):
    """A persisted timestamp could not be parsed."""

    default_message = "malformed timestamp in storage"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"{self.default_message}: {value!r}")


class OperationTimeoutError(StorageError):
    """A store operation exceeded its deadline and was abandoned."""

    default_message = "operation timed out"


class ConfigError(TaskAPIError):
    """Configuration is missing or invalid."""

    default_message = "invalid configuration"
