"""
Error taxonomy for generation and command dispatch.

The gateway raises a single failure type (GenerationFailure) no matter
which SDK or transport error happened underneath. Orchestrators decide
what to do with it:

- Chat and device control are conversational: failures become assistant
  replies.
- Image and video are task-oriented: failures propagate to the router,
  which turns them into HTTP errors.
"""

from typing import Optional


class StudioError(Exception):
    """Base class for every error raised by the generation core."""


class GenerationFailure(StudioError):
    """
    Transport or service-level failure for any modality.

    Attributes:
        cause: The underlying exception (if any)
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class NoImageReturned(StudioError):
    """The image model answered without any inline image data."""

    def __init__(self, message: str = "No image data returned."):
        super().__init__(message)


class MissingResultUri(StudioError):
    """A video job finished but did not report a result URI."""

    def __init__(self, message: str = "Video generation failed to return a URI."):
        super().__init__(message)


class DeviceNotFound(StudioError):
    """No registry entry matched the device name the model picked."""

    def __init__(self, query: str):
        super().__init__(f"No device matches '{query}'")
        self.query = query


class VideoJobTimeout(GenerationFailure):
    """The video job stayed non-terminal for longer than the poll bound."""


class VideoJobCancelled(StudioError):
    """The caller abandoned a video job while it was being polled."""
