"""
Device Mapper - Maps the device name chosen by the model to a Device.

Problem it Solves:
=================
The model answers with names like:
- "living room"           (shorter than the real name)
- "the Front Door lock"   (longer than the real name)
- "THERMOSTAT"            (different case)

We need to match these to: Device(id="1", name="Living Room Light")

Matching Strategy:
=================
Case-insensitive bidirectional substring match, in registry order:
a device matches when its name contains the query OR the query contains
its name. The first matching device wins, so the result is stable for a
given registry order.
"""

import logging
from typing import List, Optional

from app.ai.errors import DeviceNotFound
from app.schemas.device import Device

logger = logging.getLogger("omni.ai.device_mapper")


class DeviceMapper:
    """
    Resolves model-supplied device names against the device registry.

    Usage:
        mapper = DeviceMapper()
        device = mapper.resolve("living room", registry.list())
        print(device.name)  # "Living Room Light"
    """

    def match(self, query: str, devices: List[Device]) -> Optional[Device]:
        """
        Find the first device whose name overlaps the query.

        Args:
            query: The name as chosen by the model
            devices: Devices in registry order

        Returns:
            The matched Device, or None
        """
        if not devices:
            logger.warning("No devices provided for matching")
            return None

        needle = self._normalize(query)
        if not needle:
            logger.warning("Empty device name provided")
            return None

        for device in devices:
            name = self._normalize(device.name)
            if needle in name or name in needle:
                logger.info(f"Matched '{query}' to '{device.name}'")
                return device

        logger.warning(f"No match found for '{query}'")
        return None

    def resolve(self, query: str, devices: List[Device]) -> Device:
        """
        Like match(), but a miss is an error.

        Raises:
            DeviceNotFound: If no device matches the query
        """
        device = self.match(query, devices)
        if device is None:
            raise DeviceNotFound(query)
        return device

    def _normalize(self, name: str) -> str:
        return (name or "").strip().lower()


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
device_mapper = DeviceMapper()
