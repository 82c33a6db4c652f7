"""One-shot scan and speed-test commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from loguru import logger
from tabulate import tabulate

from netdash.config import Settings
from netdash.exceptions import NetdashError
from netdash.telemetry.models import ScanResult, SpeedTestResult
from netdash.telemetry.service import TelemetryService


def parse_args(args: list[str] | None = None, prog: str = "netdash scan") -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Run a single neighbor-table scan or speed test and print the result",
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--registry",
        type=Path,
        help="JSON file with the infrastructure registry definition",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(args)


def format_scan(result: ScanResult) -> str:
    infra_rows = [
        [m.identifier, m.display_name, m.category.value, m.network_address or "-", m.status.value]
        for m in result.infra
    ]
    client_rows = [
        [c.identifier, c.display_name, c.vendor.value, c.network_address, c.link_address, c.status.value]
        for c in result.clients
    ]
    parts = [
        tabulate(infra_rows, headers=["id", "name", "type", "address", "status"], tablefmt="simple"),
        "",
        tabulate(client_rows, headers=["id", "name", "vendor", "address", "mac", "status"], tablefmt="simple"),
    ]
    return "\n".join(parts)


def format_speed_test(result: SpeedTestResult) -> str:
    last_run = (
        datetime.fromtimestamp(result.last_run_timestamp / 1000).isoformat(timespec="seconds")
        if result.last_run_timestamp
        else "never"
    )
    rows = [
        ["download", f"{result.download_mbps:.2f} Mbps"],
        ["upload", f"{result.upload_mbps:.2f} Mbps"],
        ["ping", f"{result.ping_ms:.2f} ms"],
        ["last run", last_run],
    ]
    return tabulate(rows, tablefmt="simple")


def _setup(parsed: argparse.Namespace) -> TelemetryService:
    if not parsed.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")
    return TelemetryService(Settings.from_env(registry_file=parsed.registry))


def main(args: list[str] | None = None) -> None:
    """Scan once and print registry members and clients."""
    parsed = parse_args(args)
    service = _setup(parsed)

    try:
        result = asyncio.run(service.read_scan())
    except NetdashError as e:
        logger.error(f"Scan failed: {e}")
        sys.exit(1)

    if parsed.format == "json":
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_scan(result))


def speedtest_main(args: list[str] | None = None) -> None:
    """Run one speed test and print it."""
    parsed = parse_args(args, prog="netdash speedtest")
    service = _setup(parsed)

    asyncio.run(service.speedtest.run())
    result = service.read_speed_test()
    if not result.last_run_timestamp:
        logger.error("Speed test did not produce a result")
        sys.exit(1)

    if parsed.format == "json":
        print(json.dumps(result.model_dump(by_alias=True), indent=2))
    else:
        print(format_speed_test(result))
