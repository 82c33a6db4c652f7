"""TelemetryService — the read/refresh surface used by the HTTP API and CLIs."""

from __future__ import annotations

from loguru import logger

from netdash.config import Settings
from netdash.telemetry._util import CommandRunner, run_cmd
from netdash.telemetry.hostinfo import collect_host_info
from netdash.telemetry.models import HostInfo, RadioInfo, ScanResult, SpeedTestResult
from netdash.telemetry.radio import read_radio_info
from netdash.telemetry.reconciler import ScanReconciler
from netdash.telemetry.registry import InfrastructureRegistry
from netdash.telemetry.speedtest import SpeedTestCache, SpeedTestScheduler


class TelemetryService:
    """Owns the registry and speed-test cache; nothing here is module-global."""

    def __init__(
        self,
        settings: Settings | None = None,
        runner: CommandRunner = run_cmd,
        registry: InfrastructureRegistry | None = None,
    ):
        self.settings = settings or Settings()
        self.runner = runner

        if registry is None:
            if self.settings.registry_file is not None:
                logger.info(f"Loading infrastructure registry from {self.settings.registry_file}")
                registry = InfrastructureRegistry.from_file(self.settings.registry_file)
            else:
                registry = InfrastructureRegistry()
        self.registry = registry

        self.reconciler = ScanReconciler(
            registry,
            runner=runner,
            probe_timeout=self.settings.probe_timeout,
            command_timeout=self.settings.command_timeout,
        )
        self.speedtest = SpeedTestCache(
            runner=runner,
            command=self.settings.speedtest_command,
            timeout=self.settings.speedtest_timeout,
            latency_host=self.settings.latency_host,
            latency_count=self.settings.latency_count,
        )
        self.scheduler = SpeedTestScheduler(self.speedtest, interval=self.settings.speedtest_interval)

    def start(self) -> None:
        """Start periodic speed tests (first run immediately)."""
        self.scheduler.start()

    async def stop(self) -> None:
        """Stop the scheduler and cancel a measurement still in flight."""
        await self.scheduler.stop()
        await self.speedtest.close()

    async def read_scan(self) -> ScanResult:
        return await self.reconciler.scan()

    def read_speed_test(self) -> SpeedTestResult:
        return self.speedtest.result

    def request_speed_test_run(self) -> bool:
        """True if a run was started, False if one is already in progress."""
        return self.speedtest.trigger_run()

    def read_host_info(self) -> HostInfo:
        return collect_host_info()

    async def read_radio_info(self) -> RadioInfo | None:
        return await read_radio_info(self.runner, self.settings.command_timeout)
