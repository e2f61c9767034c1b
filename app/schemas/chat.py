"""
Chat schemas - conversation turns and reasoning modes.
"""

from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, Field


class ReasoningMode(str, Enum):
    """
    Model tier selection for a chat request.

    FAST: default low-latency model
    DEEP: higher-latency model with an explicit thinking budget
    """
    FAST = "fast"
    DEEP = "deep"


class ConversationTurn(BaseModel):
    """
    One message of a conversation.

    The caller owns the ordered list of turns; orchestrators only read it
    and hand back the new turns to append.
    """
    role: Literal["user", "model"]
    text: str


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class ChatRequest(BaseModel):
    """
    Request body for POST /chat.

    Example:
    {
        "history": [{"role": "model", "text": "Hello."}],
        "message": "How do I list services in PowerShell?",
        "mode": "fast"
    }
    """
    history: List[ConversationTurn] = Field(default_factory=list)
    message: str = Field(..., min_length=1, description="New user message")
    mode: ReasoningMode = ReasoningMode.FAST


class ChatResponse(BaseModel):
    """Assistant reply plus the two turns to append to the history."""
    reply: str
    turns: List[ConversationTurn]
