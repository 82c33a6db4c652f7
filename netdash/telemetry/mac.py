"""MAC address normalization and vendor classification by prefix."""

from __future__ import annotations

import re

from netdash.telemetry.models import Vendor

_SEPARATORS = re.compile(r"[:-]")

# Prefixes are matched against the canonical (uppercase, colon) form.
# Heuristic only: several prefixes per brand, no IEEE lookup.
VENDOR_PREFIXES: list[tuple[str, Vendor]] = [
    ("36:34:52", Vendor.APPLE),
    ("5C:E9:1E", Vendor.APPLE),
    ("D4:8A:FC", Vendor.APPLE),
    ("F0:B3:EC", Vendor.APPLE),
    ("00:00:", Vendor.GOOGLE),
    ("7A:D3:0C", Vendor.GOOGLE),
    ("B8:7B:D4", Vendor.GOOGLE),
    ("D0:FC:D0", Vendor.ATT),
]


def normalize_mac(address: str) -> str:
    """Return ``address`` as uppercase, colon-separated two-digit octets.

    BSD ``arp`` drops leading zeros (``0:1b:2:...``); those octets are
    zero-padded. Empty input yields an empty string.
    """
    if not address:
        return ""
    return ":".join(part.zfill(2) for part in _SEPARATORS.split(address.strip())).upper()


def classify_vendor(address: str) -> Vendor:
    """Best-effort brand classification from the address prefix."""
    canonical = normalize_mac(address)
    if not canonical:
        return Vendor.OTHER
    for prefix, vendor in VENDOR_PREFIXES:
        if canonical.startswith(prefix):
            return vendor
    return Vendor.OTHER
