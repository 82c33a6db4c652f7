"""Shared fixtures for the netdash test suite."""

from __future__ import annotations

import json

import pytest

from netdash.exceptions import ExternalToolError

# ── command runner fakes ──────────────────────────────────────────────

ARP_OUTPUT = """\
? (192.168.1.50) at aa:bb:cc:dd:ee:ff on en0 ifscope [ethernet]
? (192.168.86.1) at b8:7b:d4:b8:7:25 on en0 ifscope [ethernet]
? (192.168.86.2) at b8:7b:d4:b8:1:c1 on en0 ifscope [ethernet]
? (192.168.86.31) at 5c:e9:1e:1:2:3 on en0 ifscope [ethernet]
? (192.168.86.40) at (incomplete) on en0 ifscope [ethernet]
"""

PING_OUTPUT = """\
PING 8.8.8.8 (8.8.8.8): 56 data bytes
64 bytes from 8.8.8.8: icmp_seq=0 ttl=117 time=11.512 ms

--- 8.8.8.8 ping statistics ---
4 packets transmitted, 4 packets received, 0.0% packet loss
round-trip min/avg/max/stddev = 10.123/14.567/19.001/3.210 ms
"""

NETWORK_QUALITY_OUTPUT = json.dumps(
    {
        "dl_throughput": 512345678,
        "ul_throughput": 98765432,
        "responsiveness": 1234,
    }
)


class FakeRunner:
    """Async stand-in for run_cmd keyed by the command name.

    A response may be a string (stdout) or an exception instance to raise.
    """

    def __init__(self, responses: dict | None = None):
        self.responses: dict = dict(responses or {})
        self.calls: list[list[str]] = []

    async def __call__(self, cmd: list[str], timeout: float = 30) -> str:
        self.calls.append(list(cmd))
        response = self.responses.get(cmd[0])
        if response is None:
            raise ExternalToolError(f"Command {cmd[0]} not available", command=cmd[0])
        if isinstance(response, BaseException):
            raise response
        return response

    def commands(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def fake_runner():
    """Factory fixture returning a FakeRunner with the given responses."""

    def _make(**responses):
        return FakeRunner(responses)

    return _make


@pytest.fixture()
def healthy_runner():
    """FakeRunner where arp, ping and networkQuality all succeed."""
    return FakeRunner(
        {
            "arp": ARP_OUTPUT,
            "ping": PING_OUTPUT,
            "networkQuality": NETWORK_QUALITY_OUTPUT,
        }
    )
