"""Neighbor-table (``arp -a``) parsing."""

from __future__ import annotations

import re

from loguru import logger

from netdash.telemetry._util import CommandRunner

# "? (192.168.1.50) at aa:bb:cc:dd:ee:ff on en0 ifscope [ethernet]"
# "gateway (192.168.1.1) at 0:1b:2c:3d:4e:5f [ether] on eth0"
_ADDR_RE = re.compile(r"\(([^()\s]+)\)")
_LLADDR_RE = re.compile(r"\sat\s+(\S+)")
_MAC_RE = re.compile(r"^[0-9A-Fa-f]{1,2}([:-])[0-9A-Fa-f]{1,2}(\1[0-9A-Fa-f]{1,2}){4}$")

INCOMPLETE_MARKER = "incomplete"


def parse_neighbor_table(text: str) -> list[tuple[str, str]]:
    """Extract ``(network_address, link_address)`` pairs from ``arp -a`` output.

    Header lines, unresolved entries and anything without both fields are
    dropped. Duplicates are kept in order.
    """
    pairs: list[tuple[str, str]] = []

    for line in text.splitlines():
        addr_match = _ADDR_RE.search(line)
        lladdr_match = _LLADDR_RE.search(line)
        if not addr_match or not lladdr_match:
            continue

        lladdr = lladdr_match.group(1)
        if INCOMPLETE_MARKER in lladdr.lower():
            continue
        if not _MAC_RE.match(lladdr):
            logger.debug(f"Skipping neighbor entry with odd link address: {line.strip()}")
            continue

        pairs.append((addr_match.group(1), lladdr))

    return pairs


async def read_neighbor_table(runner: CommandRunner, timeout: float = 15) -> list[tuple[str, str]]:
    """Dump the host neighbor table and parse it."""
    output = await runner(["arp", "-a"], timeout)
    pairs = parse_neighbor_table(output)
    logger.debug(f"Neighbor table: {len(pairs)} resolved entries")
    return pairs
