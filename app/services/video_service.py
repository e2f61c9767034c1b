"""
Video Service - submit a Veo job and poll it until it finishes.

State machine:
=============
    submit ──► pending ──► running ──► done   → result URI
                  │           │
                  └───────────┴──────► failed → GenerationFailure

While the job is not terminal the orchestrator sleeps a fixed interval and
re-queries it. The sleep is an asyncio sleep, so only the calling task
waits. Cancellation is checked before every poll, either through an
asyncio.Event passed by the caller or by cancelling the task itself.

The loop is bounded by settings.VIDEO_MAX_POLLS. That bound only changes
how a job that never finishes ends (VideoJobTimeout instead of waiting
forever); the success path is the same.
"""

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Optional
from urllib.parse import quote

from app.core.config import settings
from app.core.credentials import CredentialProvider
from app.ai.errors import GenerationFailure, MissingResultUri, VideoJobCancelled, VideoJobTimeout
from app.ai.monitoring.logger import ai_logger
from app.ai.providers.base import ModelGateway
from app.schemas.media import VIDEO_ASPECT_RATIOS, VIDEO_RESOLUTIONS, JobState, VideoJobRequest

logger = logging.getLogger("omni.services.video")

Sleep = Callable[[float], Awaitable[None]]


class VideoJobOrchestrator:
    """
    Video generation orchestrator.

    Usage:
        videos = VideoJobOrchestrator(gemini_gateway, credential_provider)
        uri = await videos.generate("A drone shot of a city at sunset")

        # Abandoning a job
        cancel = asyncio.Event()
        task = asyncio.create_task(videos.generate(prompt, cancel_event=cancel))
        cancel.set()  # polling stops before the next status check
    """

    def __init__(
        self,
        gateway: ModelGateway,
        credentials: CredentialProvider,
        poll_interval: Optional[float] = None,
        max_polls: Optional[int] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.gateway = gateway
        self.credentials = credentials
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.VIDEO_POLL_INTERVAL_SECONDS
        )
        self.max_polls = max_polls if max_polls is not None else settings.VIDEO_MAX_POLLS
        self._sleep = sleep

    async def generate(
        self,
        prompt: str,
        resolution: str = "720p",
        aspect_ratio: str = "16:9",
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """
        Generate one video and return its URI.

        Raises:
            ValueError: Unsupported resolution or aspect ratio
            GenerationFailure: Service failure or the job ended in `failed`
            VideoJobTimeout: The job outlived the poll bound
            VideoJobCancelled: cancel_event was set while polling
            MissingResultUri: The job finished without a URI
        """
        if resolution not in VIDEO_RESOLUTIONS:
            raise ValueError(f"Unsupported resolution: {resolution}")
        if aspect_ratio not in VIDEO_ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {aspect_ratio}")

        # Veo may need a key picked interactively before the first job
        await self.credentials.ensure_selected()

        job_id = uuid.uuid4().hex[:8]
        job = await self.gateway.submit_video_job(
            VideoJobRequest(
                model=settings.VIDEO_MODEL,
                prompt=prompt,
                resolution=resolution,
                aspect_ratio=aspect_ratio,
            )
        )
        ai_logger.log_event(job_id, "video_job_submitted", {"state": job.state.value})

        polls = 0
        while not job.state.is_terminal:
            if polls >= self.max_polls:
                ai_logger.log_error(job_id, "poll limit reached", stage="video_poll")
                raise VideoJobTimeout(
                    f"Video job still {job.state.value} after {polls} status checks"
                )

            await self._sleep(self.poll_interval)

            if cancel_event is not None and cancel_event.is_set():
                ai_logger.log_event(job_id, "video_job_cancelled", {"polls": polls})
                raise VideoJobCancelled("Video job abandoned by caller")

            update = await self.gateway.poll_video_job(job)
            try:
                job = job.advance(update)
            except ValueError as e:
                ai_logger.log_error(job_id, str(e), stage="video_poll")
                raise GenerationFailure(f"Video job reported an invalid state: {e}", cause=e) from e
            polls += 1
            ai_logger.log_event(job_id, "video_job_polled", {"state": job.state.value, "polls": polls})

        if job.state == JobState.FAILED:
            raise GenerationFailure(f"Video generation failed: {job.error or 'unknown error'}")

        if not job.result_uri:
            raise MissingResultUri()

        logger.info(f"Video job {job_id} finished after {polls} status checks")
        return job.result_uri

    def playable_uri(self, uri: str) -> str:
        """
        Append the API key so a browser can download the video directly.

        Returns the URI unchanged when no key is selected.
        """
        api_key = self.credentials.get_api_key()
        if not api_key:
            return uri
        separator = "&" if "?" in uri else "?"
        return f"{uri}{separator}key={quote(api_key, safe='')}"
