"""Orchestrator CLI — dispatches to sub-CLIs.

Sub-commands:
  serve      Run the dashboard telemetry HTTP API
  scan       One-shot neighbor-table scan against the infrastructure registry
  speedtest  One-shot throughput / latency measurement

Examples:
  netdash serve --port 3001

  netdash scan --format json

  NETDASH_LATENCY_HOST=1.1.1.1 netdash speedtest
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from netdash import __version__, configure_logging
from netdash import glogger
from netdash.config import ENV_PREFIX, Settings

COMMANDS = {
    "serve": ("netdash.api.cli", "main", "Run the telemetry HTTP API"),
    "scan": ("netdash.telemetry.cli", "main", "One-shot network scan"),
    "speedtest": ("netdash.telemetry.cli", "speedtest_main", "One-shot speed test"),
}


def _print_usage() -> None:
    print("usage: netdash <command> [options]\n")
    print("Available commands:")
    for cmd, (_, _, desc) in COMMANDS.items():
        print(f"  {cmd:14s}  {desc}")
    print("\nRun 'netdash <command> --help' for command-specific options.")


def _banner_rows() -> list[list[str]]:
    """Version info plus every NETDASH_* override present in the environment."""
    rows = [
        ["version", __version__],
        ["python", sys.version.split()[0]],
        ["platform", sys.platform],
        ["LOGURU_LEVEL", os.getenv("LOGURU_LEVEL", "DEBUG")],
    ]

    known = {ENV_PREFIX + name.upper() for name in Settings.model_fields}
    for var in sorted(v for v in os.environ if v.startswith(ENV_PREFIX)):
        # names Settings does not define are ignored by from_env
        label = var if var in known else f"{var} (unknown, ignored)"
        rows.append([label, os.environ[var]])
    return rows


def _print_startup_banner() -> None:
    table_str = tabulate(_banner_rows(), tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "netdash starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point — dispatch to sub-CLI."""
    configure_logging()
    _print_startup_banner()

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        _print_usage()
        sys.exit(0 if len(sys.argv) >= 2 else 1)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"netdash: unknown command '{command}'\n", file=sys.stderr)
        _print_usage()
        sys.exit(1)

    module_path, func_name, _ = COMMANDS[command]

    # Import and call the sub-CLI's entry point, passing remaining args
    from importlib import import_module

    module = import_module(module_path)
    getattr(module, func_name)(sys.argv[2:])


if __name__ == "__main__":
    main()
