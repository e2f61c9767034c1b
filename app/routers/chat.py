"""
Chat Router - POST /chat.

The client owns the conversation: it sends the full history with every
message and appends the returned turns. Failures never reach the client
as errors; the orchestrator answers with an apology instead.
"""

import logging

from fastapi import APIRouter, Depends

from app.deps import get_chat_orchestrator
from app.schemas.chat import ChatRequest, ChatResponse, ConversationTurn
from app.services.chat_service import ChatOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/greeting", response_model=ConversationTurn)
def greeting():
    """Opening model turn for a new conversation."""
    return ChatOrchestrator.opening_history()[0]


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """
    Send a message and get the assistant's reply.

    Example:
        POST /chat
        {"history": [], "message": "Explain Get-Process", "mode": "deep"}
    """
    turns = await orchestrator.exchange(request.history, request.message, request.mode)
    return ChatResponse(reply=turns[-1].text, turns=turns)
