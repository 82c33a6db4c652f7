"""ScanReconciler — merges the neighbor table into the infrastructure registry."""

from __future__ import annotations

import asyncio

from loguru import logger

from netdash.telemetry._util import CommandRunner, probe_host, run_cmd
from netdash.telemetry.mac import classify_vendor, normalize_mac
from netdash.telemetry.models import Device, DeviceCategory, DeviceStatus, ScanResult
from netdash.telemetry.neighbors import read_neighbor_table
from netdash.telemetry.registry import InfrastructureRegistry


def _client_id(index: int) -> str:
    return f"CLNT_{index:03d}"


class ScanReconciler:
    def __init__(
        self,
        registry: InfrastructureRegistry,
        runner: CommandRunner = run_cmd,
        probe_timeout: int = 1,
        command_timeout: float = 15,
    ):
        self.registry = registry
        self.runner = runner
        self.probe_timeout = probe_timeout
        self.command_timeout = command_timeout

    async def scan(self) -> ScanResult:
        """Read the neighbor table, probe the gateway and reconcile one pass.

        A failing ``arp`` invocation propagates as ExternalToolError; a failing
        probe only leaves the gateway OFFLINE.
        """
        pairs, gateway_reachable = await asyncio.gather(
            read_neighbor_table(self.runner, self.command_timeout),
            self._probe_gateway(),
        )
        return self.reconcile(pairs, gateway_reachable)

    async def _probe_gateway(self) -> bool:
        gateway = self.registry.gateway
        if gateway is None or not gateway.declared_address:
            return False
        reachable = await probe_host(self.runner, gateway.declared_address, self.probe_timeout)
        if not reachable:
            logger.info(f"Gateway {gateway.key} ({gateway.declared_address}) did not answer")
        return reachable

    def reconcile(self, pairs: list[tuple[str, str]], gateway_reachable: bool = False) -> ScanResult:
        """Merge parsed neighbor entries into a fresh registry view and publish it."""
        members = self.registry.baseline()
        clients: dict[str, Device] = {}

        for ip, raw_mac in pairs:
            mac = normalize_mac(raw_mac)
            if not mac:
                continue

            key = self.registry.resolve(mac)
            if key is not None:
                member = members[key]
                member.device.network_address = ip
                member.device.status = member.observed_status
                continue

            if mac in clients:
                clients[mac].network_address = ip
                continue

            clients[mac] = Device(
                identifier=_client_id(len(clients) + 1),
                display_name=f"DEVICE-{mac[:5]}",
                category=DeviceCategory.CLIENT,
                vendor=classify_vendor(mac),
                network_address=ip,
                link_address=mac,
                status=DeviceStatus.NOMINAL,
            )

        # the probe result is applied last and can only affect the gateway
        gateway = self.registry.gateway
        if gateway_reachable and gateway is not None:
            device = members[gateway.key].device
            device.status = DeviceStatus.NOMINAL
            if not device.network_address:
                device.network_address = gateway.declared_address

        self.registry.publish(members)
        logger.debug(f"Scan reconciled: {len(clients)} clients, {len(pairs)} neighbor entries")

        snapshot = self.registry.snapshot()
        return ScanResult(clients=list(clients.values()), infra=[m.to_wire() for m in snapshot.values()])
