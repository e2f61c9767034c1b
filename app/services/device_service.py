"""
Device Command Service - natural language → device state diff.

Flow:
=====
1. Send the device list + the user's request to the model, with the
   control_device function declared
2. No function call → the model's text is the answer, nothing changes
3. Function call → take the FIRST call only (extra calls are ignored)
4. Resolve the device name with DeviceMapper
5. Build a DeviceDiff and a confirmation message

The interpreter never touches device state. It returns the diff and the
caller applies it to the registry, so interpretation can be tested
without any UI or registry.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from app.core.config import settings
from app.ai.errors import DeviceNotFound, GenerationFailure
from app.ai.intent.device_mapper import DeviceMapper, device_mapper
from app.ai.intent.schemas import ACTION_STATUS, DeviceAction, DeviceIntent
from app.ai.monitoring.logger import ai_logger
from app.ai.prompts.device_prompts import CONTROL_DEVICE_FUNCTION, build_device_prompt
from app.ai.providers.base import ContentPart, GenerationRequest, ModelGateway
from app.schemas.device import Device, DeviceDiff, status_allowed

logger = logging.getLogger("omni.services.device")

NOT_UNDERSTOOD_MESSAGE = "I didn't understand the device command."
FAILURE_MESSAGE = "Failed to execute device control."

_CONFIRMATIONS = {
    DeviceAction.TURN_ON: "Turning on {name}.",
    DeviceAction.TURN_OFF: "Turning off {name}.",
    DeviceAction.LOCK: "Locking {name}.",
    DeviceAction.UNLOCK: "Unlocking {name}.",
}


@dataclass
class InterpretResult:
    """
    Outcome of interpreting one utterance.

    Attributes:
        message: Human-readable reply (always set)
        state_diff: Change to apply to the registry, or None
        intent: What the model asked for, when it made a function call
        processing_time_ms: Time spent interpreting
    """
    message: str
    state_diff: Optional[DeviceDiff] = None
    intent: Optional[DeviceIntent] = None
    processing_time_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "state_diff": self.state_diff.model_dump(mode="json") if self.state_diff else None,
            "intent": self.intent.model_dump(mode="json") if self.intent else None,
            "processing_time_ms": self.processing_time_ms,
        }


class DeviceCommandInterpreter:
    """
    Smart-home command interpreter.

    Usage:
        interpreter = DeviceCommandInterpreter(gemini_gateway)
        result = await interpreter.interpret("lock the front door", registry.list())
        if result.state_diff:
            registry.apply(result.state_diff)
        print(result.message)
    """

    def __init__(self, gateway: ModelGateway, mapper: Optional[DeviceMapper] = None):
        self.gateway = gateway
        self.mapper = mapper or device_mapper

    async def interpret(self, utterance: str, devices: List[Device]) -> InterpretResult:
        start_time = time.time()
        request_id = uuid.uuid4().hex[:8]

        try:
            response = await self.gateway.send(
                GenerationRequest(
                    model=settings.DEVICE_MODEL,
                    parts=[ContentPart.from_text(build_device_prompt(utterance, devices))],
                    functions=[CONTROL_DEVICE_FUNCTION],
                )
            )
        except GenerationFailure as e:
            logger.error(f"[{request_id}] Device control failed: {e}")
            return InterpretResult(message=FAILURE_MESSAGE, processing_time_ms=_elapsed(start_time))

        if not response.function_calls:
            return InterpretResult(
                message=response.text or NOT_UNDERSTOOD_MESSAGE,
                processing_time_ms=_elapsed(start_time),
            )

        if len(response.function_calls) > 1:
            logger.info(
                f"[{request_id}] Model returned {len(response.function_calls)} calls, "
                f"only the first is executed"
            )

        call = response.function_calls[0]
        intent = DeviceIntent.from_function_args(call.arguments)
        if intent is None:
            logger.warning(f"[{request_id}] Unusable control_device arguments: {call.arguments}")
            return InterpretResult(message=NOT_UNDERSTOOD_MESSAGE, processing_time_ms=_elapsed(start_time))

        result = self.dispatch(intent, devices)
        result.processing_time_ms = _elapsed(start_time)
        ai_logger.log_event(
            request_id,
            "device_dispatch",
            {
                "query": intent.target_name_query,
                "action": intent.action.value,
                "diff": result.state_diff.changes() if result.state_diff else None,
            },
        )
        return result

    def dispatch(self, intent: DeviceIntent, devices: List[Device]) -> InterpretResult:
        """
        Resolve an intent against the registry and build the diff.

        Pure: same intent + same devices always give the same result.
        """
        try:
            device = self.mapper.resolve(intent.target_name_query, devices)
        except DeviceNotFound as e:
            return InterpretResult(
                message=f"I couldn't find a device named {e.query}.",
                intent=intent,
            )

        if intent.action == DeviceAction.SET_VALUE:
            if intent.value is None:
                return InterpretResult(
                    message=f"No value was given for {device.name}.",
                    intent=intent,
                )
            return InterpretResult(
                message=f"Setting {device.name} to {intent.value}.",
                state_diff=DeviceDiff(device_id=device.id, value=intent.value),
                intent=intent,
            )

        status = ACTION_STATUS[intent.action]
        if not status_allowed(device.category, status):
            return InterpretResult(
                message=f"{device.name} is a {device.category.value} and can't be set to {status.value}.",
                intent=intent,
            )

        return InterpretResult(
            message=_CONFIRMATIONS[intent.action].format(name=device.name),
            state_diff=DeviceDiff(device_id=device.id, status=status),
            intent=intent,
        )


def _elapsed(start_time: float) -> float:
    return (time.time() - start_time) * 1000
