"""Fixed registry of known infrastructure nodes (routers / access points)."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from netdash.exceptions import RegistryError
from netdash.telemetry.mac import normalize_mac
from netdash.telemetry.models import (
    Device,
    DeviceCategory,
    DeviceStatus,
    InfraMember,
    Vendor,
)

DEFAULT_INFRASTRUCTURE: list[InfraMember] = [
    InfraMember(
        key="RT01",
        device=Device(
            identifier="RT01",
            display_name="ATT_FIBER_MAIN",
            category=DeviceCategory.ROUTER,
            vendor=Vendor.ATT,
        ),
        location="MAIN",
        declared_address="192.168.1.254",
        observed_status=DeviceStatus.NOMINAL,
        primary_gateway=True,
        download_mbps=940,
        upload_mbps=920,
        ping_ms=12,
        health=98,
        client_count=14,
    ),
    InfraMember(
        key="RT02",
        device=Device(
            identifier="RT02",
            display_name="GOOG_WIFI_MAIN",
            category=DeviceCategory.ROUTER,
            vendor=Vendor.GOOGLE,
            link_address="B8:7B:D4:B8:07:25",
        ),
        location="MAIN",
        declared_address="192.168.86.1",
        # known weak backhaul, reported degraded even when reachable
        observed_status=DeviceStatus.SUB_OPTIMAL,
        download_mbps=450,
        upload_mbps=380,
        ping_ms=24,
        health=85,
        client_count=22,
    ),
    InfraMember(
        key="AP02",
        device=Device(
            identifier="AP02",
            display_name="GOOG_WIFI_NODE",
            category=DeviceCategory.ACCESS_POINT,
            vendor=Vendor.GOOGLE,
            link_address="B8:7B:D4:B8:01:C1",
        ),
        location="NODE",
        declared_address="192.168.86.2",
        observed_status=DeviceStatus.NOMINAL,
        download_mbps=320,
        upload_mbps=280,
        ping_ms=31,
        health=80,
        client_count=11,
    ),
]

_MEMBER_LIST = TypeAdapter(list[InfraMember])


def load_registry_file(path: Path) -> list[InfraMember]:
    """Load a registry definition from a JSON array of members."""
    try:
        return _MEMBER_LIST.validate_json(path.read_bytes())
    except OSError as e:
        raise RegistryError(f"Cannot read registry file {path}: {e}") from e
    except ValidationError as e:
        raise RegistryError(f"Invalid registry file {path}: {e}") from e


def _offline(member: InfraMember) -> InfraMember:
    device = member.device.model_copy(update={"status": DeviceStatus.OFFLINE, "network_address": ""})
    return member.model_copy(update={"device": device})


class InfrastructureRegistry:
    """Closed set of infrastructure members keyed by registry key.

    Static attributes come from the definition and never change. The live
    device fields (status, network address) are replaced wholesale through
    :meth:`publish` once per reconciliation pass.
    """

    def __init__(self, members: list[InfraMember] | None = None):
        definition = DEFAULT_INFRASTRUCTURE if members is None else members
        if not definition:
            raise RegistryError("Registry definition is empty")

        self._by_link: dict[str, str] = {}
        self._gateway_key: str | None = None
        view: dict[str, InfraMember] = {}

        for member in definition:
            if member.key in view:
                raise RegistryError(f"Duplicate registry key: {member.key}")

            lladdr = normalize_mac(member.device.link_address or "")
            if lladdr:
                if lladdr in self._by_link:
                    raise RegistryError(
                        f"Link address {lladdr} declared for both {self._by_link[lladdr]} and {member.key}"
                    )
                self._by_link[lladdr] = member.key
                device = member.device.model_copy(update={"link_address": lladdr})
                member = member.model_copy(update={"device": device})

            if member.primary_gateway:
                if self._gateway_key is not None:
                    raise RegistryError(f"Multiple primary gateways: {self._gateway_key}, {member.key}")
                self._gateway_key = member.key

            view[member.key] = _offline(member)

        self._members = view
        logger.debug(f"Registry initialized with {len(view)} members (gateway={self._gateway_key})")

    @classmethod
    def from_file(cls, path: Path) -> InfrastructureRegistry:
        return cls(load_registry_file(path))

    @property
    def keys(self) -> list[str]:
        return list(self._members)

    @property
    def gateway(self) -> InfraMember | None:
        """The primary gateway member as currently published, if one is declared."""
        if self._gateway_key is None:
            return None
        return self._members[self._gateway_key].model_copy(deep=True)

    def resolve(self, link_address: str) -> str | None:
        """Registry key for a link address, or None if it is not a member."""
        return self._by_link.get(normalize_mac(link_address))

    def snapshot(self) -> dict[str, InfraMember]:
        """Copy of the current published view; mutating it has no effect here."""
        return {key: member.model_copy(deep=True) for key, member in self._members.items()}

    def baseline(self) -> dict[str, InfraMember]:
        """Fresh view with every member OFFLINE and no observed address."""
        return {key: _offline(member).model_copy(deep=True) for key, member in self._members.items()}

    def publish(self, members: dict[str, InfraMember]) -> None:
        """Replace the live view with a complete pass result.

        Only the device part of each member is taken over; static attributes
        always come from the definition.
        """
        if set(members) != set(self._members):
            raise RegistryError(f"Published member set {sorted(members)} does not match registry {self.keys}")
        self._members = {
            key: current.model_copy(update={"device": members[key].device.model_copy(deep=True)})
            for key, current in self._members.items()
        }
