"""Host machine facts for the dashboard header."""

from __future__ import annotations

import platform
import socket
import time

import psutil

from netdash.telemetry.models import HostInfo


def _format_uptime(seconds: float) -> str:
    days, rest = divmod(int(seconds), 86400)
    return f"{days}d {rest // 3600}h"


def _local_ipv4() -> str:
    """First non-loopback IPv4 address, 127.0.0.1 if there is none."""
    for addrs in psutil.net_if_addrs().values():
        for addr in addrs:
            if addr.family == socket.AF_INET and not addr.address.startswith("127."):
                return addr.address
    return "127.0.0.1"


def collect_host_info() -> HostInfo:
    mem = psutil.virtual_memory()
    return HostInfo(
        platform=platform.system().lower(),
        arch=platform.machine(),
        cpu_count=psutil.cpu_count() or 0,
        mem_percent=round(mem.percent, 1),
        uptime=_format_uptime(time.time() - psutil.boot_time()),
        local_ip=_local_ipv4(),
    )
