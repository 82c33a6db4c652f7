"""Shared helpers for invoking host utilities."""

from __future__ import annotations

import asyncio
import ipaddress
import sys
from typing import Awaitable, Callable

from loguru import logger

from netdash.exceptions import ExternalToolError

# Signature shared by run_cmd and the fakes used in tests
CommandRunner = Callable[[list[str], float], Awaitable[str]]


async def run_cmd(cmd: list[str], timeout: float = 30) -> str:
    """Run a command without a shell and return its stdout.

    Raises:
        ExternalToolError: If the command is missing, times out or exits non-zero.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        raise ExternalToolError(f"Command {cmd[0]} not available: {e}", command=cmd[0]) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise ExternalToolError(f"Command {cmd[0]} timed out after {timeout}s", command=cmd[0]) from e
    except asyncio.CancelledError:
        proc.kill()
        await proc.wait()
        raise

    if proc.returncode != 0:
        detail = stderr.decode(errors="replace").strip()
        raise ExternalToolError(
            f"Command {cmd[0]} exited with {proc.returncode}: {detail}",
            command=cmd[0],
            returncode=proc.returncode,
        )
    return stdout.decode(errors="replace")


def _ping_cmd(host: str, count: int, deadline: int | None = None) -> list[str]:
    """Build a ping command line for the current platform."""
    cmd = ["ping", "-c", str(count)]
    if deadline is not None:
        # BSD/macOS ping uses -t for the overall timeout, iputils uses -W
        cmd += ["-t" if sys.platform == "darwin" else "-W", str(deadline)]
    cmd.append(host)
    return cmd


async def probe_host(runner: CommandRunner, host: str, timeout: int = 1) -> bool:
    """Send one ICMP echo to host; True if it answered before the deadline."""
    if not _validate_ip(host):
        logger.warning(f"Refusing to probe invalid address: {host!r}")
        return False
    try:
        await runner(_ping_cmd(host, 1, timeout), timeout + 2)
    except ExternalToolError as e:
        logger.debug(f"Probe of {host} failed: {e}")
        return False
    return True


def _validate_ip(ip: str) -> bool:
    """Validate IP address string."""
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False
