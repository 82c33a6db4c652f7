"""Pydantic models and enums for dashboard telemetry."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DeviceCategory(str, Enum):
    ROUTER = "ROUTER"
    ACCESS_POINT = "ACCESS_PT"
    CLIENT = "CLIENT"
    SWITCH = "SWITCH"


class Vendor(str, Enum):
    ATT = "ATT"
    GOOGLE = "GOOGLE"
    APPLE = "APPLE"
    OTHER = "OTHER"


class DeviceStatus(str, Enum):
    NOMINAL = "NOMINAL"
    SUB_OPTIMAL = "SUB-OPTIMAL"
    WARNING = "WARNING"
    OFFLINE = "OFFLINE"


class _WireModel(BaseModel):
    """Base for models served to the dashboard (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Device(_WireModel):
    identifier: str
    display_name: str
    category: DeviceCategory
    vendor: Vendor = Vendor.OTHER
    network_address: str = ""  # empty while not observed
    link_address: Optional[str] = None
    status: DeviceStatus = DeviceStatus.OFFLINE


class InfraDevice(Device):
    """Registry member as served to the dashboard: device fields plus declared attributes."""

    location: str = ""
    declared_address: str = ""
    download_mbps: float = 0.0
    upload_mbps: float = 0.0
    ping_ms: float = 0.0
    health: int = 0
    client_count: int = 0


class InfraMember(_WireModel):
    """A statically declared router or access point plus its live device view."""

    key: str
    device: Device
    location: str = ""
    declared_address: str = ""  # probe target, may differ from the observed address
    observed_status: DeviceStatus = DeviceStatus.NOMINAL
    primary_gateway: bool = False

    # declared capacity / baseline, never updated at runtime
    download_mbps: float = 0.0
    upload_mbps: float = 0.0
    ping_ms: float = 0.0
    health: int = 0
    client_count: int = 0

    def to_wire(self) -> InfraDevice:
        return InfraDevice(
            **self.device.model_dump(),
            location=self.location,
            declared_address=self.declared_address,
            download_mbps=self.download_mbps,
            upload_mbps=self.upload_mbps,
            ping_ms=self.ping_ms,
            health=self.health,
            client_count=self.client_count,
        )


class ScanResult(_WireModel):
    clients: list[Device] = Field(default_factory=list)
    infra: list[InfraDevice] = Field(default_factory=list)


class SpeedTestResult(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    download_mbps: float = 0.0
    upload_mbps: float = 0.0
    ping_ms: float = 0.0
    last_run_timestamp: int = 0  # epoch milliseconds of the last successful run
    is_running: bool = False


class HostInfo(_WireModel):
    platform: str
    arch: str
    cpu_count: int
    mem_percent: float
    uptime: str
    local_ip: str


class RadioInfo(_WireModel):
    ssid: str = "Unknown"
    channel: str = "Unknown"
    channel_raw: Optional[str] = None
    security: str = "Unknown"
    phymode: str = "Unknown"
    signal: str = "Unknown"
    rate: str = "Unknown"
