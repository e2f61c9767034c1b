"""
Device Registry - the authoritative in-memory device list.

The registry is the owner of device state. The interpreter reads a
snapshot (`list()`) and hands back a diff; the registry applies it in one
synchronous step, so a half-applied update is never visible.
"""

import logging
from typing import Dict, List, Optional

from app.schemas.device import Device, DeviceCategory, DeviceDiff, DeviceStatus

logger = logging.getLogger("omni.services.device_registry")


def default_devices() -> List[Device]:
    """The simulated home the hub starts with."""
    return [
        Device(id="1", name="Living Room Light", category=DeviceCategory.LIGHT,
               status=DeviceStatus.OFF, value=0, location="Living Room"),
        Device(id="2", name="Main Laptop", category=DeviceCategory.COMPUTER,
               status=DeviceStatus.ON, location="Office"),
        Device(id="3", name="Front Door", category=DeviceCategory.LOCK,
               status=DeviceStatus.LOCKED, location="Entrance"),
        Device(id="4", name="Thermostat", category=DeviceCategory.THERMOSTAT,
               status=DeviceStatus.ON, value=72, location="Hallway"),
    ]


class DeviceRegistry:
    """
    Ordered, id-keyed device store.

    Usage:
        registry = DeviceRegistry()
        registry.apply(DeviceDiff(device_id="1", status=DeviceStatus.ON))
    """

    def __init__(self, devices: Optional[List[Device]] = None):
        self._devices: Dict[str, Device] = {}
        self._load(devices if devices is not None else default_devices())

    def _load(self, devices: List[Device]) -> None:
        store: Dict[str, Device] = {}
        for device in devices:
            if device.id in store:
                raise ValueError(f"Duplicate device id: {device.id}")
            store[device.id] = device
        self._devices = store

    def list(self) -> List[Device]:
        """Snapshot of all devices in registry order."""
        return list(self._devices.values())

    def get(self, device_id: str) -> Optional[Device]:
        return self._devices.get(device_id)

    def apply(self, diff: DeviceDiff) -> Device:
        """
        Apply a diff to one device.

        Raises:
            KeyError: Unknown device id
            pydantic.ValidationError: The result would be an invalid device
        """
        current = self._devices.get(diff.device_id)
        if current is None:
            raise KeyError(diff.device_id)

        updated = diff.apply_to(current)
        self._devices[diff.device_id] = updated
        logger.info(f"Device '{updated.name}' updated: {diff.changes()}")
        return updated

    def reset(self, devices: Optional[List[Device]] = None) -> None:
        """Go back to the default (or given) devices."""
        self._load(devices if devices is not None else default_devices())


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
device_registry = DeviceRegistry()
