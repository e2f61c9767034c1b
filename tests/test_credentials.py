"""
Tests for credential providers and job state transitions.
"""

from unittest.mock import AsyncMock

import pytest

from app.core.credentials import SettingsCredentialProvider
from app.schemas.media import GenerationJob, JobState


class TestSettingsCredentialProvider:
    """Tests for key lookup and interactive selection."""

    def test_explicit_key(self):
        provider = SettingsCredentialProvider(api_key="abc")
        assert provider.get_api_key() == "abc"
        assert provider.has_selected_key()

    def test_empty_key_is_none(self):
        provider = SettingsCredentialProvider(api_key="")
        assert provider.get_api_key() is None
        assert not provider.has_selected_key()

    @pytest.mark.asyncio
    async def test_selector_not_called_when_key_present(self):
        selector = AsyncMock(return_value="other")
        provider = SettingsCredentialProvider(api_key="abc", selector=selector)

        await provider.ensure_selected()

        selector.assert_not_awaited()
        assert provider.get_api_key() == "abc"

    @pytest.mark.asyncio
    async def test_selector_dismissed(self):
        provider = SettingsCredentialProvider(api_key="", selector=AsyncMock(return_value=None))

        await provider.ensure_selected()

        assert provider.get_api_key() is None

    @pytest.mark.asyncio
    async def test_no_selector(self):
        provider = SettingsCredentialProvider(api_key="")
        await provider.ensure_selected()
        assert not provider.has_selected_key()


class TestGenerationJob:
    """Tests for forward-only job transitions."""

    def test_pending_to_running_to_done(self):
        job = GenerationJob(handle="op", state=JobState.PENDING)

        job = job.advance(GenerationJob(handle="op", state=JobState.RUNNING))
        job = job.advance(GenerationJob(handle="op", state=JobState.DONE, result_uri="https://v"))

        assert job.state == JobState.DONE
        assert job.result_uri == "https://v"

    def test_pending_may_stay_pending(self):
        job = GenerationJob(handle="op", state=JobState.PENDING)
        assert job.advance(job).state == JobState.PENDING

    def test_cannot_go_backwards(self):
        job = GenerationJob(handle="op", state=JobState.RUNNING)
        with pytest.raises(ValueError):
            job.advance(GenerationJob(handle="op", state=JobState.PENDING))

    def test_terminal_is_final(self):
        job = GenerationJob(handle="op", state=JobState.FAILED, error="quota")
        with pytest.raises(ValueError):
            job.advance(GenerationJob(handle="op", state=JobState.DONE))

    def test_terminal_states(self):
        assert JobState.DONE.is_terminal
        assert JobState.FAILED.is_terminal
        assert not JobState.RUNNING.is_terminal
