"""
Device Hub Router - list simulated devices and run natural language commands.

This layer owns the device registry: it hands the current device list to
the interpreter and applies the returned diff. The interpreter itself
never changes state.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from app.deps import get_device_interpreter, get_device_registry
from app.schemas.device import Device, DeviceCommandRequest, DeviceCommandResponse
from app.services.device_registry import DeviceRegistry
from app.services.device_service import DeviceCommandInterpreter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("", response_model=List[Device])
def list_devices(registry: DeviceRegistry = Depends(get_device_registry)):
    return registry.list()


@router.post("/command", response_model=DeviceCommandResponse)
async def run_command(
    request: DeviceCommandRequest,
    interpreter: DeviceCommandInterpreter = Depends(get_device_interpreter),
    registry: DeviceRegistry = Depends(get_device_registry),
):
    """
    Interpret a command and apply the resulting change.

    Example:
        POST /devices/command
        {"text": "Turn on the living room light"}
        →
        {"message": "Turning on Living Room Light.",
         "diff": {"device_id": "1", "status": "on", "value": null},
         "devices": [...]}
    """
    result = await interpreter.interpret(request.text, registry.list())

    if result.state_diff is not None:
        registry.apply(result.state_diff)

    return DeviceCommandResponse(
        message=result.message,
        diff=result.state_diff,
        devices=registry.list(),
    )


@router.post("/reset", response_model=List[Device])
def reset_devices(registry: DeviceRegistry = Depends(get_device_registry)):
    """Restore the default simulated home."""
    registry.reset()
    return registry.list()
