"""Service configuration loaded from a YAML file."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError

CONFIG_PATH_ENV = "CONFIG_PATH"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Any) -> timedelta:
    """Parse duration strings ('500ms', '4s', '1m30s') or plain seconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ValueError(f"invalid duration: {value!r}")
        amount, unit = match.groups()
        total += float(amount) * _UNIT_SECONDS[unit]
        pos = match.end()

    if pos != len(text):
        try:
            return timedelta(seconds=float(text))
        except ValueError:
            raise ValueError(f"invalid duration: {value!r}") from None
    return timedelta(seconds=total)


class HTTPServerSettings(BaseModel):
    """Listen address and timeouts for the HTTP server."""

    address: str = "localhost:8080"
    timeout: timedelta = Field(default=timedelta(seconds=4), description="Per-request store deadline")
    idle_timeout: timedelta = Field(default=timedelta(seconds=60), description="Keep-alive timeout")
    shutdown_timeout: timedelta = Field(default=timedelta(seconds=5), description="Graceful shutdown period")

    model_config = ConfigDict(extra="forbid")

    @field_validator("timeout", "idle_timeout", "shutdown_timeout", mode="before")
    @classmethod
    def _parse_duration(cls, v: Any) -> timedelta:
        return parse_duration(v)

    @field_validator("timeout", "idle_timeout", "shutdown_timeout")
    @classmethod
    def _positive(cls, v: timedelta) -> timedelta:
        if v.total_seconds() <= 0:
            raise ValueError("duration must be positive")
        return v

    @property
    def host(self) -> str:
        """Host part of the listen address."""
        host, _, _ = self.address.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        """Port part of the listen address."""
        _, _, port = self.address.rpartition(":")
        return int(port)

    @field_validator("address")
    @classmethod
    def _valid_address(cls, v: str) -> str:
        _, sep, port = v.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"address must be host:port, got {v!r}")
        return v


class Settings(BaseModel):
    """Top-level service configuration."""

    env: Literal["local", "dev", "prod"] = "local"
    storage_path: str = "./storage/tasks.db"
    http_server: HTTPServerSettings = Field(default_factory=HTTPServerSettings)

    model_config = ConfigDict(extra="forbid")

    @property
    def log_level(self) -> str:
        """Debug logging locally, info elsewhere."""
        return "DEBUG" if self.env == "local" else "INFO"

    @property
    def json_logs(self) -> bool:
        """Human-readable console logs locally, JSON elsewhere."""
        return self.env != "local"


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from the given YAML file or from $CONFIG_PATH."""
    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV)
        if not path:
            raise ConfigError(f"{CONFIG_PATH_ENV} is not set")

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"config file does not exist: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse config file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    try:
        return Settings.model_validate(raw)
    except PydanticValidationError as exc:
        raise ConfigError(f"invalid config file {config_path}: {exc}") from exc
