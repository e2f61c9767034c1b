"""
Device Prompts - function-calling contract for smart-home control.

The model receives the full device list plus the user's request and may
answer with a single `control_device` call. Resolution of the device name
and the actual state change happen locally (see device_service.py).
"""

import json
from typing import List

from app.ai.providers.base import FunctionDeclaration, FunctionParameter
from app.schemas.device import Device


CONTROL_DEVICE_FUNCTION = FunctionDeclaration(
    name="control_device",
    description=(
        "Control smart home devices or computers. "
        "Turn them on, off, lock, unlock, or set values."
    ),
    parameters=[
        FunctionParameter(
            name="deviceName",
            type="string",
            description="Name of the device (e.g., 'Kitchen Light', 'Main Laptop', 'Front Door').",
            required=True,
        ),
        FunctionParameter(
            name="action",
            type="string",
            enum=["turn_on", "turn_off", "lock", "unlock", "set_value"],
            description="Action to perform.",
            required=True,
        ),
        FunctionParameter(
            name="value",
            type="number",
            description="Value for 'set_value' action (e.g., brightness 0-100, temperature).",
        ),
    ],
)


def build_device_prompt(utterance: str, devices: List[Device]) -> str:
    """
    Serialize the current device state and the request into one prompt.

    Example:
        >>> build_device_prompt("lock the door", [front_door])
        'Current devices state: [{"id": "3", ...}]. User Request: lock the door'
    """
    state = json.dumps([d.model_dump(mode="json") for d in devices])
    return f"Current devices state: {state}. User Request: {utterance}"
