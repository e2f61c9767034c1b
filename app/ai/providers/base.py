"""
Model Gateway - Abstract interface to the remote generative model service.

This module defines the contract every gateway implementation follows.
Orchestrators build a GenerationRequest, call `send()`, and get back a
NormalizedResponse whose shape is the same for text, image and
function-calling requests.

Design Pattern: Strategy Pattern
================================
The base class defines the interface and GeminiGateway implements it.
Tests swap in a fake gateway without touching the orchestrators.

Example:
    gateway = GeminiGateway()
    response = await gateway.send(
        GenerationRequest(model="gemini-2.5-flash", parts=[ContentPart.from_text("Hello")])
    )
    print(response.text)

Failure Contract:
=================
Every transport or service error is raised as GenerationFailure.
No retries happen here; callers that know the semantics (the video poll
loop) own their retry policy.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from app.schemas.chat import ConversationTurn
from app.schemas.media import GenerationJob, VideoJobRequest

logger = logging.getLogger("omni.ai")


class ProviderType(str, Enum):
    """Enum of supported model services."""
    GEMINI = "gemini"


@dataclass
class TokenUsage:
    """
    Token usage statistics for a model request.

    Used for:
    - Cost tracking (tokens = money)
    - Rate limiting awareness
    """
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        """Calculate total if not provided."""
        if self.total_tokens == 0:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class ContentPart:
    """
    One part of a multi-part request: text or inline binary data.

    Exactly one of `text` or `data` is set.
    """
    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ContentPart":
        return cls(data=data, mime_type=mime_type)

    @property
    def is_binary(self) -> bool:
        return self.data is not None


@dataclass
class FunctionParameter:
    """A single parameter of a function declaration."""
    name: str
    type: str  # "string", "number", "integer", "boolean"
    description: str = ""
    enum: Optional[List[str]] = None
    required: bool = False


@dataclass
class FunctionDeclaration:
    """A function the model may ask us to call."""
    name: str
    description: str
    parameters: List[FunctionParameter] = field(default_factory=list)


@dataclass
class GenerationRequest:
    """
    Everything needed for a single generate call.

    Attributes:
        model: Model identifier (e.g. "gemini-2.5-flash")
        parts: Content parts of the new user message
        system_instruction: Optional persona / instructions
        history: Previous turns, oldest first
        functions: Function declarations for function calling
        aspect_ratio: Image aspect ratio ("1:1", "16:9", ...)
        image_size: Image output size ("1K", "2K")
        thinking_budget: Reasoning budget in tokens
    """
    model: str
    parts: List[ContentPart]
    system_instruction: Optional[str] = None
    history: List[ConversationTurn] = field(default_factory=list)
    functions: List[FunctionDeclaration] = field(default_factory=list)
    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None
    thinking_budget: Optional[int] = None

    def prompt_preview(self) -> str:
        """Concatenated text parts, used for logging."""
        return " ".join(p.text for p in self.parts if p.text)


@dataclass
class BinaryPart:
    """Inline binary data returned by the model."""
    mime_type: str
    data: bytes


@dataclass
class FunctionCall:
    """A function call requested by the model."""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NormalizedResponse:
    """
    Provider-independent view of a model response.

    Attributes:
        text: Joined text parts, or None when the model sent no text
        binary_parts: Inline payloads (images), possibly empty
        function_calls: Requested function calls, possibly empty
        model: The model that answered
        provider: Which service answered
        usage: Token usage statistics
        latency_ms: How long the request took
        raw_response: Original SDK response (for debugging)
        created_at: Timestamp of the response
    """
    text: Optional[str] = None
    binary_parts: List[BinaryPart] = field(default_factory=list)
    function_calls: List[FunctionCall] = field(default_factory=list)
    model: str = ""
    provider: ProviderType = ProviderType.GEMINI
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    raw_response: Optional[Any] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        text = self.text or ""
        return {
            "text": text[:100] + "..." if len(text) > 100 else text,
            "binary_parts": [
                {"mime_type": p.mime_type, "bytes": len(p.data)} for p in self.binary_parts
            ],
            "function_calls": [c.name for c in self.function_calls],
            "provider": self.provider.value,
            "model": self.model,
            "tokens": {
                "prompt": self.usage.prompt_tokens,
                "completion": self.usage.completion_tokens,
                "total": self.usage.total_tokens,
            },
            "latency_ms": self.latency_ms,
            "created_at": self.created_at.isoformat(),
        }


class ModelGateway(ABC):
    """
    Abstract base class for model gateways.

    Responsibilities:
    - Issue requests to the model service
    - Normalize responses into NormalizedResponse / GenerationJob
    - Wrap every failure into GenerationFailure

    NOT Responsible For:
    - Model selection (orchestrators pick the model)
    - Retries and polling (VideoJobOrchestrator owns the poll loop)
    """

    provider_type: ProviderType

    @abstractmethod
    async def send(self, request: GenerationRequest) -> NormalizedResponse:
        """
        Send one request and normalize the response.

        Raises:
            GenerationFailure: On any transport or service error
        """
        pass

    @abstractmethod
    async def submit_video_job(self, request: VideoJobRequest) -> GenerationJob:
        """
        Start a long-running video generation job.

        Returns:
            GenerationJob in state PENDING (or terminal, if the service
            finished immediately)

        Raises:
            GenerationFailure: On any transport or service error
        """
        pass

    @abstractmethod
    async def poll_video_job(self, job: GenerationJob) -> GenerationJob:
        """
        Re-query a job by its handle.

        Returns:
            A fresh snapshot: RUNNING while in progress, DONE or FAILED

        Raises:
            GenerationFailure: On any transport or service error
        """
        pass

    def _measure_latency(self, start_time: float) -> float:
        """Calculate latency in milliseconds."""
        return (time.time() - start_time) * 1000
