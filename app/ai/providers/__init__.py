"""
AI Providers Module - Gateway to the remote generative model service.

Every orchestrator talks to the model service through a ModelGateway:
    response = await gateway.send(request)

The only implementation is GeminiGateway (google-genai). Tests replace it
with a fake that implements the same three coroutines.
"""

from app.ai.providers.base import (
    BinaryPart,
    ContentPart,
    FunctionCall,
    FunctionDeclaration,
    FunctionParameter,
    GenerationRequest,
    ModelGateway,
    NormalizedResponse,
    ProviderType,
    TokenUsage,
)
from app.ai.providers.gemini import GeminiGateway, gemini_gateway

__all__ = [
    "BinaryPart",
    "ContentPart",
    "FunctionCall",
    "FunctionDeclaration",
    "FunctionParameter",
    "GenerationRequest",
    "ModelGateway",
    "NormalizedResponse",
    "ProviderType",
    "TokenUsage",
    "GeminiGateway",
    "gemini_gateway",
]
