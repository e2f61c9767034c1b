"""
AI Logger - Structured logging for model calls.

This module provides structured logging for everything that talks to the
model service. It captures:
- Request details (model, prompt preview, request class)
- Response details (text length, binary parts, function calls, latency)
- Errors and failures
- Pipeline events (video polls, device dispatch)

Log Format:
==========
Each entry is a JSON object with an `event` name, the request ID and a
timestamp. Prompts are truncated and API keys are never logged.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Dict, Any

if TYPE_CHECKING:
    from app.ai.providers.base import NormalizedResponse

# Configure the AI logger
logger = logging.getLogger("omni.ai")
logger.setLevel(logging.INFO)

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _preview(text: str, limit: int = 100) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class AILogger:
    """
    Structured logger for model calls.

    Usage:
        ai_logger.log_request(request_id="abc123", prompt="A red fox", model="gemini-2.5-flash")
        ai_logger.log_response(request_id="abc123", response=normalized)
    """

    def __init__(self):
        """Initialize the AI logger."""
        self._logger = logger

    def log_request(
        self,
        request_id: str,
        prompt: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a model request.

        Args:
            request_id: Unique request identifier
            prompt: The prompt being sent (truncated for privacy)
            model: Model name
            metadata: Additional metadata (history length, part count, ...)
        """
        log_data = {
            "event": "ai_request",
            "request_id": request_id,
            "model": model,
            "prompt_length": len(prompt),
            "prompt_preview": _preview(prompt),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if metadata:
            log_data["metadata"] = metadata

        self._logger.info(f"AI Request: {json.dumps(log_data)}")

    def log_response(
        self,
        request_id: str,
        response: "NormalizedResponse",
    ) -> None:
        """Log a normalized model response."""
        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "provider": response.provider.value,
            "model": response.model,
            "latency_ms": round(response.latency_ms, 2),
            "tokens": {
                "prompt": response.usage.prompt_tokens,
                "completion": response.usage.completion_tokens,
                "total": response.usage.total_tokens,
            },
            "text_length": len(response.text) if response.text else 0,
            "binary_parts": len(response.binary_parts),
            "function_calls": [c.name for c in response.function_calls],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        self._logger.info(f"AI Response: {json.dumps(log_data)}")

    def log_error(
        self,
        request_id: str,
        error: str,
        stage: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an error in the generation pipeline.

        Args:
            request_id: Request identifier
            error: Error message
            stage: Where the error occurred (send, video_submit, video_poll, ...)
            metadata: Additional context
        """
        log_data = {
            "event": "ai_error",
            "request_id": request_id,
            "error": error,
            "stage": stage,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if metadata:
            log_data["metadata"] = metadata

        self._logger.error(f"AI Error: {json.dumps(log_data)}")

    def log_event(
        self,
        request_id: str,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a generic pipeline event.

        Args:
            request_id: Request identifier
            event_type: Type of event (video_poll, device_dispatch, ...)
            data: Event-specific data
        """
        log_data = {
            "event": event_type,
            "request_id": request_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if data:
            log_data.update(data)

        self._logger.info(f"AI Event: {json.dumps(log_data, default=str)}")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_logger = AILogger()
