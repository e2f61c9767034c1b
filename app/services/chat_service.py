"""
Chat Service - one assistant reply per user message.

Builds the request (persona, history, new message), picks the model tier
from the reasoning mode, and turns every outcome into a string. The chat
surface never shows a raw transport error: a GenerationFailure becomes an
apology reply.
"""

import logging
from typing import List, Optional

from app.core.config import settings
from app.ai.errors import GenerationFailure
from app.ai.prompts.assistant_prompts import ASSISTANT_GREETING, ASSISTANT_SYSTEM_PROMPT
from app.ai.providers.base import ContentPart, GenerationRequest, ModelGateway
from app.schemas.chat import ConversationTurn, ReasoningMode

logger = logging.getLogger("omni.services.chat")

EMPTY_REPLY = "I couldn't generate a text response."
FAILURE_REPLY = "I encountered an error processing your request."


class ChatOrchestrator:
    """
    Chat assistant orchestrator.

    Usage:
        chat = ChatOrchestrator(gemini_gateway)
        reply = await chat.respond(history, "Why is my laptop fan loud?", ReasoningMode.DEEP)
    """

    GREETING = ASSISTANT_GREETING

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    def build_request(
        self,
        history: List[ConversationTurn],
        new_message: str,
        mode: ReasoningMode,
    ) -> GenerationRequest:
        deep = mode == ReasoningMode.DEEP
        return GenerationRequest(
            model=settings.CHAT_MODEL_DEEP if deep else settings.CHAT_MODEL_FAST,
            system_instruction=ASSISTANT_SYSTEM_PROMPT,
            history=list(history),
            parts=[ContentPart.from_text(new_message)],
            thinking_budget=settings.DEEP_THINKING_BUDGET if deep else None,
        )

    async def respond(
        self,
        history: List[ConversationTurn],
        new_message: str,
        mode: ReasoningMode = ReasoningMode.FAST,
    ) -> str:
        """
        Generate the assistant reply to `new_message`.

        Returns:
            The reply text, EMPTY_REPLY when the model sent no text, or
            FAILURE_REPLY when the model service failed
        """
        request = self.build_request(history, new_message, mode)

        try:
            response = await self.gateway.send(request)
        except GenerationFailure as e:
            logger.error(f"Text generation failed ({request.model}): {e}")
            return FAILURE_REPLY

        return response.text or EMPTY_REPLY

    async def exchange(
        self,
        history: List[ConversationTurn],
        new_message: str,
        mode: ReasoningMode = ReasoningMode.FAST,
    ) -> List[ConversationTurn]:
        """
        Run one round and return the turns for the caller to append.

        The caller's history is not modified.
        """
        reply = await self.respond(history, new_message, mode)
        return [
            ConversationTurn(role="user", text=new_message),
            ConversationTurn(role="model", text=reply),
        ]

    @classmethod
    def opening_history(cls, greeting: Optional[str] = None) -> List[ConversationTurn]:
        """History of a fresh conversation: just the assistant greeting."""
        return [ConversationTurn(role="model", text=greeting or cls.GREETING)]
