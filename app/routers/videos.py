"""
Video Studio Router - POST /videos.

The request stays open while the job is polled (this can take minutes).
Starlette does not cancel the handler when the client goes away, so the
handler runs the job as a task next to a watcher that checks the
connection. On disconnect the watcher sets the job's cancel event and
cancels the job task; no status check runs after that.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.config import settings
from app.ai.errors import GenerationFailure, MissingResultUri, VideoJobCancelled
from app.deps import get_video_orchestrator
from app.schemas.media import VideoRequest, VideoResponse
from app.services.video_service import VideoJobOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["videos"])

# Non-standard "client closed request" status (nginx)
CLIENT_CLOSED_REQUEST = 499


async def _cancel_on_disconnect(
    request: Request,
    job: asyncio.Task,
    cancel_event: asyncio.Event,
    interval: float,
) -> None:
    while not job.done():
        if await request.is_disconnected():
            logger.info("Client disconnected, abandoning video job")
            cancel_event.set()
            job.cancel()
            return
        await asyncio.sleep(interval)


@router.post("", response_model=VideoResponse)
async def generate_video(
    body: VideoRequest,
    request: Request,
    orchestrator: VideoJobOrchestrator = Depends(get_video_orchestrator),
):
    cancel_event = asyncio.Event()
    job = asyncio.create_task(
        orchestrator.generate(
            body.prompt,
            body.resolution,
            body.aspect_ratio,
            cancel_event=cancel_event,
        )
    )
    watcher = asyncio.create_task(
        _cancel_on_disconnect(request, job, cancel_event, settings.VIDEO_DISCONNECT_CHECK_SECONDS)
    )

    try:
        uri = await job
    except asyncio.CancelledError:
        # Our own task was cancelled (shutdown), not the job
        if not cancel_event.is_set():
            raise
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail="Video job abandoned by caller")
    except VideoJobCancelled as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail=str(e))
    except (GenerationFailure, MissingResultUri) as e:
        logger.error(f"Video generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error generating video. Please ensure you have a paid API key selected for Veo.",
        )
    finally:
        watcher.cancel()
        job.cancel()

    return VideoResponse(uri=orchestrator.playable_uri(uri))
