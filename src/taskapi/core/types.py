"""Custom SQLAlchemy column types."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from .exceptions import InvalidTimestampError

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Current UTC time truncated to the persisted (second) precision."""
    return datetime.now(UTC).replace(microsecond=0)


def format_rfc3339(value: datetime) -> str:
    """Render a datetime as RFC 3339 UTC text."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(RFC3339_FORMAT)


def parse_rfc3339(value: str) -> datetime:
    """Parse RFC 3339 text into an aware UTC datetime."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidTimestampError(value) from exc
    if parsed.tzinfo is None:
        raise InvalidTimestampError(value)
    return parsed.astimezone(UTC)


class RFC3339Timestamp(TypeDecorator[datetime]):
    """SQLAlchemy custom type for timestamps stored as sortable RFC 3339 UTC strings."""

    impl = String(20)
    cache_ok = True

    def process_bind_param(self, value: datetime | str | None, dialect: Any) -> str | None:
        """Convert datetime to RFC 3339 text for database storage."""
        if value is None:
            return None
        if isinstance(value, str):
            return format_rfc3339(parse_rfc3339(value))  # Validate and normalize
        return format_rfc3339(value)

    def process_result_value(self, value: str | None, dialect: Any) -> datetime | None:
        """Convert RFC 3339 text from database to an aware datetime."""
        if value is None:
            return None
        return parse_rfc3339(value)
