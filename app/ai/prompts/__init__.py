"""
Prompts Module - Centralized prompt templates for model interactions.

Keeping prompts centralized makes them:
- Easy to update and iterate
- Consistent across the application
- Testable and version-controlled
"""

from app.ai.prompts.assistant_prompts import ASSISTANT_GREETING, ASSISTANT_SYSTEM_PROMPT
from app.ai.prompts.device_prompts import CONTROL_DEVICE_FUNCTION, build_device_prompt

__all__ = [
    "ASSISTANT_GREETING",
    "ASSISTANT_SYSTEM_PROMPT",
    "CONTROL_DEVICE_FUNCTION",
    "build_device_prompt",
]
