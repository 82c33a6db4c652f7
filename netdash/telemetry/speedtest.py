"""Speed-test cache with single-flight measurement and a periodic scheduler."""

from __future__ import annotations

import asyncio
import json
import re
import time

from loguru import logger

from netdash.exceptions import MeasurementError, NetdashError
from netdash.telemetry._util import CommandRunner, _ping_cmd, run_cmd
from netdash.telemetry.models import SpeedTestResult

DEFAULT_SPEEDTEST_COMMAND = ["networkQuality", "-c", "-s"]

# macOS: "round-trip min/avg/max/stddev = 9.1/12.3/15.0/2.1 ms"
# Linux: "rtt min/avg/max/mdev = 9.1/12.3/15.0/2.1 ms"
_LATENCY_SUMMARY_RE = re.compile(r"min/avg/max/\w+\s*=\s*([\d.]+)/([\d.]+)/([\d.]+)")


def _to_mbps(bits_per_second: float) -> float:
    return round(bits_per_second / 1_000_000, 2)


def parse_throughput(text: str) -> tuple[float, float]:
    """Download/upload in Mbps from ``networkQuality -c`` JSON output."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MeasurementError(f"Throughput output is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise MeasurementError("Throughput output is not a JSON object")

    try:
        down = float(data["dl_throughput"])
        up = float(data["ul_throughput"])
    except (KeyError, TypeError, ValueError) as e:
        raise MeasurementError(f"Throughput fields missing or invalid: {e}") from e
    return _to_mbps(down), _to_mbps(up)


def parse_latency_average(text: str) -> float | None:
    """Average round-trip time from a ping summary line, None if absent."""
    m = _LATENCY_SUMMARY_RE.search(text)
    if not m:
        return None
    return round(float(m.group(2)), 2)


class SpeedTestCache:
    """Last-known-good speed-test result plus the single in-flight measurement."""

    def __init__(
        self,
        runner: CommandRunner = run_cmd,
        command: list[str] | None = None,
        timeout: float = 120,
        latency_host: str = "8.8.8.8",
        latency_count: int = 4,
    ):
        self.runner = runner
        self.command = command or list(DEFAULT_SPEEDTEST_COMMAND)
        self.timeout = timeout
        self.latency_host = latency_host
        self.latency_count = latency_count
        self._result = SpeedTestResult()
        self._task: asyncio.Task[None] | None = None

    @property
    def result(self) -> SpeedTestResult:
        return self._result

    @property
    def is_running(self) -> bool:
        return self._result.is_running

    def trigger_run(self) -> bool:
        """Start a measurement unless one is in flight.

        Must be called from a running event loop. Returns False when a
        measurement is already running; the cache is left untouched.
        """
        return self._start() is not None

    def _start(self) -> asyncio.Task[None] | None:
        if self._result.is_running:
            return None
        # flag first, with no await in between, so concurrent readers and
        # triggers see RUNNING immediately
        self._result = self._result.model_copy(update={"is_running": True})
        task = asyncio.create_task(self._run(), name="speedtest")
        task.add_done_callback(self._log_crash)
        self._task = task
        return task

    async def run(self) -> bool:
        """Trigger a measurement and wait for it; False if one was already running."""
        task = self._start()
        if task is None:
            return False
        await task
        return True

    async def close(self) -> None:
        """Cancel the in-flight measurement, if any, and wait for it to unwind."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("In-flight speed test cancelled")

    async def wait(self) -> None:
        """Wait for the in-flight measurement, if any."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _measure(self) -> SpeedTestResult:
        previous = self._result
        output = await self.runner(self.command, self.timeout)
        down, up = parse_throughput(output)

        ping_out = await self.runner(_ping_cmd(self.latency_host, self.latency_count), self.latency_count * 2 + 10)
        ping = parse_latency_average(ping_out)
        if ping is None:
            logger.warning("No latency average in ping output, keeping previous value")
            ping = previous.ping_ms

        return SpeedTestResult(
            download_mbps=down,
            upload_mbps=up,
            ping_ms=ping,
            last_run_timestamp=int(time.time() * 1000),
            is_running=False,
        )

    async def _run(self) -> None:
        measured: SpeedTestResult | None = None
        try:
            measured = await self._measure()
            logger.info(
                f"Speed test completed: {measured.download_mbps} Mbps / {measured.upload_mbps} Mbps / {measured.ping_ms} ms"
            )
        except NetdashError as e:
            logger.error(f"Speed test failed: {e}")
        finally:
            if measured is not None:
                self._result = measured
            else:
                self._result = self._result.model_copy(update={"is_running": False})

    @staticmethod
    def _log_crash(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Speed test crashed")


class SpeedTestScheduler:
    """Repeating timer that triggers the cache at start-up and every ``interval`` seconds."""

    def __init__(self, cache: SpeedTestCache, interval: float = 600):
        self.cache = cache
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def is_started(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_started:
            logger.debug("Speed-test scheduler already running")
            return
        logger.info(f"Starting speed-test scheduler (every {self.interval:.0f}s)")
        self._task = asyncio.create_task(self._loop(), name="speedtest-scheduler")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Speed-test scheduler stopped")

    async def _loop(self) -> None:
        while True:
            if not self.cache.trigger_run():
                logger.debug("Scheduled speed test skipped, one is already running")
            await asyncio.sleep(self.interval)
