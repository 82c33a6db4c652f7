"""Wi-Fi radio metadata from ``system_profiler SPAirPortDataType -json``."""

from __future__ import annotations

import json
from typing import Any

from netdash.exceptions import ExternalToolError
from netdash.telemetry._util import CommandRunner
from netdash.telemetry.models import RadioInfo

PROFILER_CMD = ["system_profiler", "SPAirPortDataType", "-json"]
_SECURITY_PREFIX = "spairport_security_mode_"


def _active_network(data: dict[str, Any]) -> dict[str, Any] | None:
    for card in data.get("SPAirPortDataType") or []:
        for iface in card.get("spairport_airport_interfaces") or []:
            current = iface.get("spairport_current_network_information")
            if current:
                return current
    return None


def _channel_number(raw: str | None) -> str:
    # "52 (5GHz, 80MHz)" -> "52"
    if not raw:
        return "Unknown"
    parts = str(raw).split()
    return parts[0] if parts else "Unknown"


def parse_airport_profile(text: str) -> RadioInfo | None:
    """RadioInfo for the associated network, None if no radio is associated."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExternalToolError(f"system_profiler output is not JSON: {e}", command=PROFILER_CMD[0]) from e
    if not isinstance(data, dict):
        raise ExternalToolError("system_profiler output is not a JSON object", command=PROFILER_CMD[0])

    net = _active_network(data)
    if net is None:
        return None

    raw_channel = net.get("spairport_network_channel")
    security = net.get("spairport_security_mode")
    return RadioInfo(
        ssid=net.get("_name") or "Unknown",
        channel=_channel_number(raw_channel),
        channel_raw=str(raw_channel) if raw_channel is not None else None,
        security=security.replace(_SECURITY_PREFIX, "") if security else "Unknown",
        phymode=net.get("spairport_network_phymode") or "Unknown",
        signal=net.get("spairport_signal_noise") or "Unknown",
        rate=str(net.get("spairport_network_rate") or "Unknown"),
    )


async def read_radio_info(runner: CommandRunner, timeout: float = 15) -> RadioInfo | None:
    return parse_airport_profile(await runner(PROFILER_CMD, timeout))
