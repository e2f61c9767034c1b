"""
Device schemas - simulated smart-home devices and the diffs applied to them.

A Device is never edited in place by the AI layer. The interpreter
produces a DeviceDiff and the registry applies it.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator


class DeviceCategory(str, Enum):
    """Kinds of devices the hub can simulate."""
    LIGHT = "light"
    THERMOSTAT = "thermostat"
    LOCK = "lock"
    COMPUTER = "computer"


class DeviceStatus(str, Enum):
    """Every status value used by any category."""
    ON = "on"
    OFF = "off"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


# Legal statuses per category: a lock is never on/off, a light is never locked
ALLOWED_STATUSES: Dict[DeviceCategory, frozenset] = {
    DeviceCategory.LIGHT: frozenset({DeviceStatus.ON, DeviceStatus.OFF}),
    DeviceCategory.THERMOSTAT: frozenset({DeviceStatus.ON, DeviceStatus.OFF}),
    DeviceCategory.COMPUTER: frozenset({DeviceStatus.ON, DeviceStatus.OFF}),
    DeviceCategory.LOCK: frozenset({DeviceStatus.LOCKED, DeviceStatus.UNLOCKED}),
}

DeviceValue = Union[int, float, str]


def status_allowed(category: DeviceCategory, status: DeviceStatus) -> bool:
    return status in ALLOWED_STATUSES[category]


class Device(BaseModel):
    """
    A simulated device.

    Example:
    {
        "id": "4",
        "name": "Thermostat",
        "category": "thermostat",
        "status": "on",
        "value": 72,
        "location": "Hallway"
    }
    """
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    category: DeviceCategory
    status: DeviceStatus
    # Brightness, temperature, ... depending on the category
    value: Optional[DeviceValue] = None
    location: str = ""

    @model_validator(mode="after")
    def _check_status(self) -> "Device":
        if not status_allowed(self.category, self.status):
            raise ValueError(
                f"Status '{self.status.value}' is not valid for a {self.category.value}"
            )
        return self


class DeviceDiff(BaseModel):
    """
    Partial update for one device.

    Only the fields that change are set; None means "leave as is".
    """
    device_id: str
    status: Optional[DeviceStatus] = None
    value: Optional[DeviceValue] = None

    def changes(self) -> Dict[str, Any]:
        """Changed fields only, e.g. {"value": 75}."""
        return self.model_dump(exclude={"device_id"}, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.changes()

    def apply_to(self, device: Device) -> Device:
        """Return a new Device with the changes applied (validated)."""
        merged = device.model_dump()
        merged.update(self.changes())
        return Device.model_validate(merged)


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class DeviceCommandRequest(BaseModel):
    """
    Request body for POST /devices/command.

    Example:
    {
        "text": "Turn on the living room light"
    }
    """
    text: str = Field(..., min_length=1, max_length=500)


class DeviceCommandResponse(BaseModel):
    """Acknowledgement, the diff that was applied (if any) and the new state."""
    message: str
    diff: Optional[DeviceDiff] = None
    devices: List[Device]
