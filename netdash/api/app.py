"""FastAPI application exposing the telemetry service to the dashboard."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from netdash import __version__
from netdash.config import Settings
from netdash.exceptions import NetdashError
from netdash.telemetry.models import HostInfo, RadioInfo, ScanResult, SpeedTestResult
from netdash.telemetry.service import TelemetryService


def create_app(service: TelemetryService | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API around ``service`` (a new one from ``settings`` if omitted).

    The lifespan starts the speed-test scheduler; it only runs when the app
    is served (or a TestClient is used as a context manager).
    """
    svc = service or TelemetryService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        svc.start()
        try:
            yield
        finally:
            await svc.stop()

    app = FastAPI(title="netdash telemetry API", version=__version__, lifespan=lifespan)
    app.state.service = svc

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NetdashError)
    async def netdash_error_handler(request: Request, exc: NetdashError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"{request.method} {request.url.path} crashed")
        return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})

    @app.get("/api/scan")
    async def scan() -> ScanResult:
        return await svc.read_scan()

    @app.get("/api/speedtest")
    async def speedtest() -> SpeedTestResult:
        return svc.read_speed_test()

    @app.post("/api/speedtest/run")
    async def speedtest_run() -> Any:
        if not svc.request_speed_test_run():
            return JSONResponse(status_code=400, content={"status": "already_running"})
        return {"status": "started"}

    @app.get("/api/hostinfo")
    async def hostinfo() -> HostInfo:
        return svc.read_host_info()

    @app.get("/api/sysinfo")
    async def sysinfo() -> Any:
        radio: RadioInfo | None = await svc.read_radio_info()
        if radio is None:
            return {"error": "No active Wi-Fi"}
        return radio.model_dump(by_alias=True)

    return app
