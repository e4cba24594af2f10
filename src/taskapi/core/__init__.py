"""Core framework components - database, models, types, errors, logging and config."""

from .config import HTTPServerSettings, Settings, load_settings, parse_duration
from .database import Database, sqlite_url
from .exceptions import (
    ConfigError,
    InvalidTimestampError,
    NotFoundError,
    OperationTimeoutError,
    StorageError,
    TaskAPIError,
    ValidationError,
)
from .logging import configure_logging, get_logger
from .models import Base
from .types import RFC3339Timestamp, format_rfc3339, parse_rfc3339, utc_now

__all__ = [
    # Database
    "Database",
    "sqlite_url",
    "Base",
    # Types
    "RFC3339Timestamp",
    "format_rfc3339",
    "parse_rfc3339",
    "utc_now",
    # Errors
    "TaskAPIError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "InvalidTimestampError",
    "OperationTimeoutError",
    "ConfigError",
    # Logging
    "configure_logging",
    "get_logger",
    # Config
    "Settings",
    "HTTPServerSettings",
    "load_settings",
    "parse_duration",
]
