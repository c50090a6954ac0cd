"""
Clover device models.

Devices are Clover terminals (Flex, Mini, Station...). Physical printers are
not devices: they are attached to one of these in the Printers app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


# Keys Clover has been seen to wrap device lists under, in lookup order
DEVICE_CONTAINER_KEYS = ("elements", "data")


def normalize_devices(raw: Any) -> List[Dict[str, Any]]:
    """
    Turn a GET /devices body into a plain list of device dicts.

    Fallback order:
        1. raw is already a list -> use it
        2. raw["elements"]
        3. raw["data"]
        4. anything else -> []

    The first key with a non-null value wins; if that value is not a list
    the result is [].

    Args:
        raw: Decoded response body from CloverAPIClient.list_devices()

    Returns:
        List of raw device dicts
    """
    if isinstance(raw, list):
        devices = raw
    elif isinstance(raw, dict):
        devices = None
        for key in DEVICE_CONTAINER_KEYS:
            if raw.get(key) is not None:
                devices = raw[key]
                break
    else:
        devices = None

    if not isinstance(devices, list):
        return []
    return [d for d in devices if isinstance(d, dict)]


@dataclass(frozen=True)
class Device:
    """Summary of one Clover device."""

    id: Optional[str]
    """Clover device UUID (None if Clover omitted it)."""

    name: Optional[str] = None
    """Merchant-assigned device name."""

    model: Optional[str] = None
    """Hardware model code (e.g. C406, C505)."""

    serial: Optional[str] = None
    """Hardware serial number."""

    device_type_name: Optional[str] = None
    """Human-readable device type."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        """Create from a Clover device dict."""
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            model=data.get("model"),
            serial=data.get("serial"),
            device_type_name=data.get("deviceTypeName"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the summary shape returned by GET /test-print/devices."""
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "serial": self.serial,
            "deviceTypeName": self.device_type_name,
        }


def parse_devices(raw: Any) -> List[Device]:
    """normalize_devices() followed by Device.from_dict() on each entry."""
    return [Device.from_dict(d) for d in normalize_devices(raw)]
