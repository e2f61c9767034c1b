"""
Media schemas - image payloads and video generation jobs.

Design Notes:
=============
An image edit may come back as a new picture OR as a text answer
(analysis, instructions). That ambiguity comes from the model service, so
ImagePayload is a tagged union and callers branch on `kind`:

    payload = await image_orchestrator.edit(data, "image/png", "add a hat")
    if payload.kind == "binary":
        show(payload.data_uri())
    else:
        explain(payload.content)
"""

import base64
from dataclasses import dataclass, replace
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# IMAGE PAYLOADS
# ---------------------------------------------------------------------------

AspectRatio = Literal["1:1", "3:4", "4:3", "9:16", "16:9"]
IMAGE_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")


class BinaryImage(BaseModel):
    """Inline image bytes returned by the model."""
    kind: Literal["binary"] = "binary"
    mime_type: str = "image/png"
    data: bytes

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class TextResult(BaseModel):
    """Textual answer returned instead of an image."""
    kind: Literal["text"] = "text"
    content: str


ImagePayload = Annotated[Union[BinaryImage, TextResult], Field(discriminator="kind")]


class ImageCreateRequest(BaseModel):
    """
    Request body for POST /images/create.

    Example:
    {
        "prompt": "A lighthouse at dawn, watercolor",
        "aspect_ratio": "16:9"
    }
    """
    prompt: str = Field(..., min_length=1)
    aspect_ratio: AspectRatio = "1:1"


class ImageEditRequest(BaseModel):
    """
    Request body for POST /images/edit.

    `image` is the current picture as a data URI
    (data:image/png;base64,...).
    """
    image: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)


class ImageResponse(BaseModel):
    """Either `image` (data URI) or `text` is set, matching `kind`."""
    kind: Literal["binary", "text"]
    image: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Union[BinaryImage, TextResult]) -> "ImageResponse":
        if isinstance(payload, BinaryImage):
            return cls(kind="binary", image=payload.data_uri())
        return cls(kind="text", text=payload.content)


# ---------------------------------------------------------------------------
# VIDEO JOBS
# ---------------------------------------------------------------------------

VideoResolution = Literal["720p", "1080p"]
VideoAspectRatio = Literal["16:9", "9:16"]
VIDEO_RESOLUTIONS = ("720p", "1080p")
VIDEO_ASPECT_RATIOS = ("16:9", "9:16")


class JobState(str, Enum):
    """Lifecycle of a video generation job."""
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.DONE, JobState.FAILED)


# Position in the lifecycle; a job never moves to a lower rank
_STATE_RANK = {
    JobState.PENDING: 0,
    JobState.RUNNING: 1,
    JobState.DONE: 2,
    JobState.FAILED: 2,
}


@dataclass(frozen=True)
class GenerationJob:
    """
    Snapshot of a long-running video job.

    Attributes:
        handle: Opaque service handle (SDK operation) used to re-query
        state: Current lifecycle state
        result_uri: Video URI, set once the job is done
        error: Service error message for failed jobs
    """
    handle: Any
    state: JobState
    result_uri: Optional[str] = None
    error: Optional[str] = None

    def advance(self, update: "GenerationJob") -> "GenerationJob":
        """
        Move to the state reported by a newer snapshot.

        Raises:
            ValueError: If the update would move the job backwards or
                change a terminal job
        """
        if self.state.is_terminal:
            raise ValueError(f"Job already finished with state '{self.state.value}'")
        if _STATE_RANK[update.state] < _STATE_RANK[self.state]:
            raise ValueError(
                f"Job cannot go from '{self.state.value}' back to '{update.state.value}'"
            )
        return replace(
            self,
            handle=update.handle,
            state=update.state,
            result_uri=update.result_uri,
            error=update.error,
        )


@dataclass(frozen=True)
class VideoJobRequest:
    """Parameters of a video generation job."""
    model: str
    prompt: str
    resolution: str = "720p"
    aspect_ratio: str = "16:9"
    number_of_videos: int = 1


class VideoRequest(BaseModel):
    """
    Request body for POST /videos.

    Example:
    {
        "prompt": "A cinematic drone shot of a futuristic city at sunset",
        "resolution": "720p",
        "aspect_ratio": "16:9"
    }
    """
    prompt: str = Field(..., min_length=1)
    resolution: VideoResolution = "720p"
    aspect_ratio: VideoAspectRatio = "16:9"


class VideoResponse(BaseModel):
    uri: str
