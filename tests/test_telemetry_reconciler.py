"""Tests for netdash/telemetry/reconciler.py"""

import asyncio

import pytest
from conftest import ARP_OUTPUT, PING_OUTPUT, FakeRunner

from netdash.exceptions import ExternalToolError
from netdash.telemetry.models import DeviceCategory, DeviceStatus, Vendor
from netdash.telemetry.reconciler import ScanReconciler
from netdash.telemetry.registry import InfrastructureRegistry


@pytest.fixture
def reconciler():
    """Fixture providing a ScanReconciler over the default registry."""
    return ScanReconciler(InfrastructureRegistry(), runner=FakeRunner())


def _infra(result):
    return {m.identifier: m for m in result.infra}


class TestReconcile:
    """Tests for ScanReconciler.reconcile."""

    def test_unknown_mac_becomes_client(self, reconciler):
        """Test an unregistered MAC yields one transient client."""
        result = reconciler.reconcile([("192.168.1.50", "AA:BB:CC:DD:EE:FF")])

        assert len(result.clients) == 1
        client = result.clients[0]
        assert client.identifier == "CLNT_001"
        assert client.network_address == "192.168.1.50"
        assert client.link_address == "AA:BB:CC:DD:EE:FF"
        assert client.display_name == "DEVICE-AA:BB"
        assert client.category == DeviceCategory.CLIENT
        assert client.status == DeviceStatus.NOMINAL

    def test_registry_match_updates_member(self, reconciler):
        """Test a row with a member's MAC updates it and creates no client."""
        result = reconciler.reconcile([("192.168.86.7", "b8:7b:d4:b8:7:25")])

        assert result.clients == []
        rt02 = _infra(result)["RT02"]
        assert rt02.network_address == "192.168.86.7"
        assert rt02.status == DeviceStatus.SUB_OPTIMAL

    def test_member_observed_status_differs(self, reconciler):
        """Test members use their own observed status."""
        result = reconciler.reconcile([("192.168.86.2", "B8:7B:D4:B8:01:C1")])

        assert _infra(result)["AP02"].status == DeviceStatus.NOMINAL

    def test_unmatched_members_offline(self, reconciler):
        """Test members absent from the table and without probe are OFFLINE."""
        result = reconciler.reconcile([("192.168.1.50", "AA:BB:CC:DD:EE:FF")], gateway_reachable=False)

        for member in result.infra:
            assert member.status == DeviceStatus.OFFLINE
            assert member.network_address == ""

    def test_stale_state_does_not_leak(self, reconciler):
        """Test a member seen in one pass is OFFLINE in the next if absent."""
        reconciler.reconcile([("192.168.86.2", "B8:7B:D4:B8:01:C1")])
        result = reconciler.reconcile([])

        assert _infra(result)["AP02"].status == DeviceStatus.OFFLINE
        assert _infra(result)["AP02"].network_address == ""

    def test_gateway_probe_success(self, reconciler):
        """Test a reachable gateway is NOMINAL with its declared address."""
        result = reconciler.reconcile([], gateway_reachable=True)

        rt01 = _infra(result)["RT01"]
        assert rt01.status == DeviceStatus.NOMINAL
        assert rt01.network_address == "192.168.1.254"

    def test_probe_only_affects_gateway(self, reconciler):
        """Test the probe result does not touch other members."""
        result = reconciler.reconcile([], gateway_reachable=True)

        assert _infra(result)["RT02"].status == DeviceStatus.OFFLINE
        assert _infra(result)["AP02"].status == DeviceStatus.OFFLINE

    def test_duplicate_member_rows_last_wins(self, reconciler):
        """Test the last row for a member sets its address."""
        result = reconciler.reconcile(
            [("192.168.86.5", "B8:7B:D4:B8:07:25"), ("192.168.86.6", "B8:7B:D4:B8:07:25")]
        )

        assert _infra(result)["RT02"].network_address == "192.168.86.6"

    def test_duplicate_client_rows_merge(self, reconciler):
        """Test one client per link address, last address wins."""
        result = reconciler.reconcile(
            [("192.168.1.50", "aa:bb:cc:dd:ee:ff"), ("192.168.1.51", "AA:BB:CC:DD:EE:FF")]
        )

        assert len(result.clients) == 1
        assert result.clients[0].network_address == "192.168.1.51"

    def test_sequential_client_ids(self, reconciler):
        """Test clients are numbered in table order per pass."""
        result = reconciler.reconcile(
            [("10.0.0.1", "11:11:11:11:11:11"), ("10.0.0.2", "22:22:22:22:22:22"), ("10.0.0.3", "5c:e9:1e:0:0:1")]
        )

        assert [c.identifier for c in result.clients] == ["CLNT_001", "CLNT_002", "CLNT_003"]
        assert result.clients[2].vendor == Vendor.APPLE

    def test_result_published_to_registry(self, reconciler):
        """Test the registry holds the pass result afterwards."""
        reconciler.reconcile([("192.168.86.2", "B8:7B:D4:B8:01:C1")])

        assert reconciler.registry.snapshot()["AP02"].device.status == DeviceStatus.NOMINAL


class TestScan:
    """Tests for ScanReconciler.scan coroutine."""

    def test_full_pass(self):
        """Test arp and gateway probe results are merged."""
        runner = FakeRunner({"arp": ARP_OUTPUT, "ping": PING_OUTPUT})
        reconciler = ScanReconciler(InfrastructureRegistry(), runner=runner)

        result = asyncio.run(reconciler.scan())

        infra = _infra(result)
        assert infra["RT01"].status == DeviceStatus.NOMINAL
        assert infra["RT02"].status == DeviceStatus.SUB_OPTIMAL
        assert infra["AP02"].status == DeviceStatus.NOMINAL
        assert [c.network_address for c in result.clients] == ["192.168.1.50", "192.168.86.31"]
        assert ["ping", "-c", "1"] == runner.calls[[c[0] for c in runner.calls].index("ping")][:3]

    def test_probe_failure_does_not_abort(self):
        """Test a failing ping leaves the gateway OFFLINE but the scan completes."""
        runner = FakeRunner({"arp": ARP_OUTPUT, "ping": ExternalToolError("timeout", command="ping")})
        reconciler = ScanReconciler(InfrastructureRegistry(), runner=runner)

        result = asyncio.run(reconciler.scan())

        assert _infra(result)["RT01"].status == DeviceStatus.OFFLINE
        assert len(result.clients) == 2

    def test_arp_failure_raises(self):
        """Test a failing arp command propagates."""
        runner = FakeRunner({"ping": PING_OUTPUT})
        reconciler = ScanReconciler(InfrastructureRegistry(), runner=runner)

        with pytest.raises(ExternalToolError):
            asyncio.run(reconciler.scan())
