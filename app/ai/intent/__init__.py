"""
Intent Module - device command intents and device name resolution.
"""

from app.ai.intent.device_mapper import DeviceMapper, device_mapper
from app.ai.intent.schemas import ACTION_STATUS, DeviceAction, DeviceIntent

__all__ = [
    "ACTION_STATUS",
    "DeviceAction",
    "DeviceIntent",
    "DeviceMapper",
    "device_mapper",
]
