"""
Intent Schemas - structured result of interpreting a device command.

A DeviceIntent is what the model asked for, before the device name is
resolved against the registry. It is transient and never persisted.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from app.schemas.device import DeviceStatus, DeviceValue


class DeviceAction(str, Enum):
    """Actions accepted by the control_device function."""
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"
    LOCK = "lock"
    UNLOCK = "unlock"
    SET_VALUE = "set_value"


# Status each status-changing action sets; SET_VALUE changes `value` instead
ACTION_STATUS = {
    DeviceAction.TURN_ON: DeviceStatus.ON,
    DeviceAction.TURN_OFF: DeviceStatus.OFF,
    DeviceAction.LOCK: DeviceStatus.LOCKED,
    DeviceAction.UNLOCK: DeviceStatus.UNLOCKED,
}


class DeviceIntent(BaseModel):
    """
    Intent for a device control command.

    Examples:
    - "Turn on the living room light" → target_name_query="living room light", action=turn_on
    - "Set the thermostat to 75" → target_name_query="thermostat", action=set_value, value=75
    """
    target_name_query: str = Field(description="Device name as chosen by the model")
    action: DeviceAction
    value: Optional[DeviceValue] = None

    @classmethod
    def from_function_args(cls, arguments: Dict[str, Any]) -> Optional["DeviceIntent"]:
        """
        Build an intent from control_device arguments.

        Numbers come back from the model as floats; integral ones are
        turned into ints so "75" stays 75 and not 75.0.

        Returns:
            DeviceIntent, or None if the arguments are unusable
        """
        value = arguments.get("value")
        if isinstance(value, float) and value.is_integer():
            value = int(value)

        try:
            return cls(
                target_name_query=str(arguments.get("deviceName") or ""),
                action=arguments.get("action"),
                value=value,
            )
        except ValidationError:
            return None
