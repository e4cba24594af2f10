"""Command-line entry point serving the task API."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from taskapi.api import create_app, run_app
from taskapi.core import ConfigError, configure_logging, get_logger, load_settings
from taskapi.core.config import CONFIG_PATH_ENV

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="taskapi", description="Serve the task tracking HTTP API.")
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help=f"Path to the YAML config file (default: ${CONFIG_PATH_ENV})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load configuration and serve until SIGINT/SIGTERM."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"taskapi: {exc.message}", file=sys.stderr)
        return 2

    configure_logging(level=settings.log_level, json_output=settings.json_logs)

    if settings.storage_path != ":memory:":
        Path(settings.storage_path).parent.mkdir(parents=True, exist_ok=True)

    logger.info("config.loaded", env=settings.env, storage_path=settings.storage_path)

    server = settings.http_server
    run_app(
        create_app(settings),
        host=server.host,
        port=server.port,
        timeout_keep_alive=server.idle_timeout.total_seconds(),
        timeout_graceful_shutdown=server.shutdown_timeout.total_seconds(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
