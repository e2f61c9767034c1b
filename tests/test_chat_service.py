"""
Tests for ChatOrchestrator.

This module tests:
- Model tier selection (fast vs deep + thinking budget)
- Request building (persona, history, new message last)
- Fallback reply for empty text
- Apology reply on GenerationFailure
"""

import pytest

from app.ai.errors import GenerationFailure
from app.ai.prompts.assistant_prompts import ASSISTANT_SYSTEM_PROMPT
from app.schemas.chat import ConversationTurn, ReasoningMode
from app.services.chat_service import EMPTY_REPLY, FAILURE_REPLY, ChatOrchestrator

from conftest import text_response


@pytest.fixture
def chat(gateway) -> ChatOrchestrator:
    return ChatOrchestrator(gateway)


@pytest.fixture
def history():
    return [
        ConversationTurn(role="model", text="Hello. I am AI for Future."),
        ConversationTurn(role="user", text="My laptop is slow."),
        ConversationTurn(role="model", text="Check Task Manager."),
    ]


class TestModelSelection:
    """Tests for reasoning mode → model tier."""

    def test_fast_mode_uses_flash_without_budget(self, chat, history):
        request = chat.build_request(history, "Thanks", ReasoningMode.FAST)

        assert request.model == "gemini-2.5-flash"
        assert request.thinking_budget is None

    def test_deep_mode_uses_pro_with_budget(self, chat, history):
        request = chat.build_request(history, "Plan a migration", ReasoningMode.DEEP)

        assert request.model == "gemini-3-pro-preview"
        assert request.thinking_budget == 2048

    def test_request_carries_persona_and_history(self, chat, history):
        request = chat.build_request(history, "What next?", ReasoningMode.FAST)

        assert request.system_instruction == ASSISTANT_SYSTEM_PROMPT
        assert [t.text for t in request.history] == [t.text for t in history]
        assert request.parts[-1].text == "What next?"

    def test_history_is_not_mutated(self, chat, history):
        before = list(history)
        chat.build_request(history, "What next?", ReasoningMode.FAST)
        assert history == before


class TestRespond:
    """Tests for ChatOrchestrator.respond()."""

    @pytest.mark.asyncio
    async def test_returns_model_text(self, chat, gateway, history):
        gateway.send.return_value = text_response("Run Get-Process.")

        reply = await chat.respond(history, "How do I list processes?")

        assert reply == "Run Get-Process."
        gateway.send.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("empty", [None, ""])
    async def test_empty_text_gets_fallback(self, chat, gateway, empty):
        gateway.send.return_value = text_response(empty)

        reply = await chat.respond([], "Hi")

        assert reply == EMPTY_REPLY
        assert reply == "I couldn't generate a text response."

    @pytest.mark.asyncio
    async def test_failure_becomes_apology(self, chat, gateway):
        gateway.send.side_effect = GenerationFailure("connection reset")

        reply = await chat.respond([], "Hi", ReasoningMode.DEEP)

        assert reply == FAILURE_REPLY
        assert "connection reset" not in reply


class TestExchange:
    """Tests for the turns returned to the caller."""

    @pytest.mark.asyncio
    async def test_returns_user_and_model_turns(self, chat, gateway, history):
        gateway.send.return_value = text_response("Sure.")

        turns = await chat.exchange(history, "Help me")

        assert [(t.role, t.text) for t in turns] == [("user", "Help me"), ("model", "Sure.")]
        assert len(history) == 3

    def test_opening_history_is_greeting(self):
        turns = ChatOrchestrator.opening_history()

        assert len(turns) == 1
        assert turns[0].role == "model"
        assert "AI for Future" in turns[0].text
