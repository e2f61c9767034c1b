"""
Tests for VideoJobOrchestrator - submit + poll state machine.

This module tests:
- Poll loop: number of sleeps, final URI
- Terminal states: failed job, done without URI
- Safety bound (max polls) and cancellation
- Credential selection before submission
- Forward-only job state transitions
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.ai.errors import (
    GenerationFailure,
    MissingResultUri,
    VideoJobCancelled,
    VideoJobTimeout,
)
from app.core.credentials import SettingsCredentialProvider
from app.schemas.media import GenerationJob, JobState
from app.services.video_service import VideoJobOrchestrator


VIDEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/abc:download?alt=media"


def job(state: JobState, uri=None, error=None) -> GenerationJob:
    return GenerationJob(handle=f"operations/{state.value}", state=state, result_uri=uri, error=error)


@pytest.fixture
def sleep() -> AsyncMock:
    """Records sleeps instead of waiting."""
    return AsyncMock()


@pytest.fixture
def orchestrator(gateway, credentials, sleep) -> VideoJobOrchestrator:
    return VideoJobOrchestrator(gateway, credentials, poll_interval=5, max_polls=10, sleep=sleep)


class TestPollLoop:
    """Tests for the happy path of the poll loop."""

    @pytest.mark.asyncio
    async def test_two_pending_reports_then_done(self, orchestrator, gateway, sleep):
        """pending, pending, done → exactly two sleeps and the done URI."""
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.side_effect = [
            job(JobState.PENDING),
            job(JobState.DONE, uri=VIDEO_URI),
        ]

        uri = await orchestrator.generate("a city at sunset")

        assert uri == VIDEO_URI
        assert sleep.await_count == 2
        sleep.assert_awaited_with(5)
        assert gateway.poll_video_job.await_count == 2

    @pytest.mark.asyncio
    async def test_already_done_on_submit(self, orchestrator, gateway, sleep):
        """A job that finishes immediately is never polled."""
        gateway.submit_video_job.return_value = job(JobState.DONE, uri=VIDEO_URI)

        uri = await orchestrator.generate("a city at sunset")

        assert uri == VIDEO_URI
        sleep.assert_not_awaited()
        gateway.poll_video_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_submission_parameters(self, orchestrator, gateway):
        """The job request carries prompt, resolution and aspect ratio."""
        gateway.submit_video_job.return_value = job(JobState.DONE, uri=VIDEO_URI)

        await orchestrator.generate("a fox", resolution="1080p", aspect_ratio="9:16")

        request = gateway.submit_video_job.call_args.args[0]
        assert request.prompt == "a fox"
        assert request.resolution == "1080p"
        assert request.aspect_ratio == "9:16"
        assert request.number_of_videos == 1
        assert request.model == "veo-3.1-fast-generate-preview"

    @pytest.mark.asyncio
    async def test_running_state_is_polled_through(self, orchestrator, gateway, sleep):
        """pending → running → running → done."""
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.side_effect = [
            job(JobState.RUNNING),
            job(JobState.RUNNING),
            job(JobState.DONE, uri=VIDEO_URI),
        ]

        assert await orchestrator.generate("waves") == VIDEO_URI
        assert sleep.await_count == 3


class TestTerminalFailures:
    """Tests for failed and incomplete jobs."""

    @pytest.mark.asyncio
    async def test_failed_job_raises_generation_failure(self, orchestrator, gateway):
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.return_value = job(JobState.FAILED, error="quota exceeded")

        with pytest.raises(GenerationFailure, match="quota exceeded"):
            await orchestrator.generate("waves")

    @pytest.mark.asyncio
    async def test_done_without_uri(self, orchestrator, gateway):
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.return_value = job(JobState.DONE)

        with pytest.raises(MissingResultUri):
            await orchestrator.generate("waves")

    @pytest.mark.asyncio
    async def test_submission_failure_propagates(self, orchestrator, gateway):
        gateway.submit_video_job.side_effect = GenerationFailure("503 unavailable")

        with pytest.raises(GenerationFailure):
            await orchestrator.generate("waves")

    @pytest.mark.asyncio
    async def test_state_cannot_go_back_to_pending(self, orchestrator, gateway):
        """A service report that moves the job backwards is rejected."""
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.side_effect = [job(JobState.RUNNING), job(JobState.PENDING)]

        with pytest.raises(GenerationFailure, match="invalid state") as exc:
            await orchestrator.generate("waves")

        assert isinstance(exc.value.cause, ValueError)


class TestBoundsAndCancellation:
    """Tests for the poll limit and caller cancellation."""

    @pytest.mark.asyncio
    async def test_poll_limit(self, gateway, credentials, sleep):
        orchestrator = VideoJobOrchestrator(gateway, credentials, poll_interval=5, max_polls=3, sleep=sleep)
        gateway.submit_video_job.return_value = job(JobState.PENDING)
        gateway.poll_video_job.return_value = job(JobState.RUNNING)

        with pytest.raises(VideoJobTimeout):
            await orchestrator.generate("waves")

        assert gateway.poll_video_job.await_count == 3

    def test_timeout_is_a_generation_failure(self):
        assert issubclass(VideoJobTimeout, GenerationFailure)

    @pytest.mark.asyncio
    async def test_cancel_event_stops_before_next_poll(self, orchestrator, gateway):
        cancel = asyncio.Event()
        gateway.submit_video_job.return_value = job(JobState.PENDING)

        async def poll(current):
            cancel.set()
            return job(JobState.RUNNING)

        gateway.poll_video_job.side_effect = poll

        with pytest.raises(VideoJobCancelled):
            await orchestrator.generate("waves", cancel_event=cancel)

        assert gateway.poll_video_job.await_count == 1

    @pytest.mark.asyncio
    async def test_task_cancellation_stops_polling(self, gateway, credentials):
        """Cancelling the calling task interrupts the sleep; no further polls."""
        orchestrator = VideoJobOrchestrator(gateway, credentials, poll_interval=60, max_polls=10)
        gateway.submit_video_job.return_value = job(JobState.PENDING)

        task = asyncio.create_task(orchestrator.generate("waves"))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        gateway.poll_video_job.assert_not_awaited()


class TestValidationAndCredentials:
    """Tests for option validation and key selection."""

    @pytest.mark.asyncio
    async def test_unsupported_resolution(self, orchestrator, gateway):
        with pytest.raises(ValueError):
            await orchestrator.generate("waves", resolution="4k")
        gateway.submit_video_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_aspect_ratio(self, orchestrator, gateway):
        with pytest.raises(ValueError):
            await orchestrator.generate("waves", aspect_ratio="1:1")

    @pytest.mark.asyncio
    async def test_key_selection_runs_before_submission(self, gateway, sleep):
        """With no key selected, the selector is asked before the job is submitted."""
        order = []

        async def selector():
            order.append("select")
            return "picked-key"

        async def submit(request):
            order.append("submit")
            return job(JobState.DONE, uri=VIDEO_URI)

        credentials = SettingsCredentialProvider(api_key="", selector=selector)
        gateway.submit_video_job.side_effect = submit
        orchestrator = VideoJobOrchestrator(gateway, credentials, sleep=sleep)

        await orchestrator.generate("waves")

        assert order == ["select", "submit"]
        assert credentials.get_api_key() == "picked-key"

    def test_playable_uri_appends_key(self, orchestrator):
        assert orchestrator.playable_uri(VIDEO_URI) == f"{VIDEO_URI}&key=test-key"

    def test_playable_uri_without_query(self, orchestrator):
        assert orchestrator.playable_uri("https://x/video.mp4") == "https://x/video.mp4?key=test-key"

    def test_playable_uri_without_key(self, gateway):
        orchestrator = VideoJobOrchestrator(gateway, SettingsCredentialProvider(api_key=""))
        assert orchestrator.playable_uri(VIDEO_URI) == VIDEO_URI
