"""CLI entry point for serving the telemetry HTTP API."""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn
from loguru import logger

from netdash.api.app import create_app
from netdash.config import Settings


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="netdash serve",
        description="Serve the dashboard telemetry API (scan, speed test, host and radio info)",
    )
    parser.add_argument(
        "--host",
        help="Bind address (default: 127.0.0.1, env NETDASH_HOST)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        help="Listen port (default: 3001, env NETDASH_PORT)",
    )
    parser.add_argument(
        "--speedtest-interval",
        type=float,
        help="Seconds between scheduled speed tests (default: 600)",
    )
    parser.add_argument(
        "--registry",
        type=Path,
        help="JSON file with the infrastructure registry definition",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: warning)",
    )
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> None:
    parsed = parse_args(args)
    settings = Settings.from_env(
        host=parsed.host,
        port=parsed.port,
        speedtest_interval=parsed.speedtest_interval,
        registry_file=parsed.registry,
    )

    app = create_app(settings=settings)
    logger.info(f"Server API listening on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=parsed.log_level)
