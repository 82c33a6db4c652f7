"""Telemetry subpackage.

ARP neighbor-table parsing, MAC normalization and vendor classification,
infrastructure registry reconciliation and the cached speed test behind the
dashboard's read endpoints.
"""

from netdash.telemetry.mac import classify_vendor, normalize_mac
from netdash.telemetry.models import (
    Device,
    DeviceCategory,
    DeviceStatus,
    HostInfo,
    InfraDevice,
    InfraMember,
    RadioInfo,
    ScanResult,
    SpeedTestResult,
    Vendor,
)
from netdash.telemetry.neighbors import parse_neighbor_table
from netdash.telemetry.reconciler import ScanReconciler
from netdash.telemetry.registry import DEFAULT_INFRASTRUCTURE, InfrastructureRegistry
from netdash.telemetry.service import TelemetryService
from netdash.telemetry.speedtest import SpeedTestCache, SpeedTestScheduler

__all__ = [
    "TelemetryService",
    "ScanReconciler",
    "InfrastructureRegistry",
    "DEFAULT_INFRASTRUCTURE",
    "SpeedTestCache",
    "SpeedTestScheduler",
    "parse_neighbor_table",
    "normalize_mac",
    "classify_vendor",
    "Device",
    "DeviceCategory",
    "DeviceStatus",
    "HostInfo",
    "InfraDevice",
    "InfraMember",
    "RadioInfo",
    "ScanResult",
    "SpeedTestResult",
    "Vendor",
]
