"""
Image Service - create and edit images through the model service.

Two flows:
- create: text prompt → new image (a missing image is an error)
- edit: current image + instruction → new image OR a text answer

The edit answer is ambiguous by nature (the model may describe or analyse
instead of drawing), so it is returned as an ImagePayload and the caller
branches on `kind`. ImageWorkspace shows how a caller does that: only a
binary payload replaces the working image.

Errors are not converted here. GenerationFailure and NoImageReturned
propagate to the router, which reports them to the operator.
"""

import base64
import binascii
import logging
import re
from typing import Optional, Tuple, Union

from app.core.config import settings
from app.ai.errors import NoImageReturned
from app.ai.providers.base import ContentPart, GenerationRequest, ModelGateway
from app.schemas.media import IMAGE_ASPECT_RATIOS, BinaryImage, TextResult

logger = logging.getLogger("omni.services.image")

EDIT_FALLBACK_TEXT = "Processed image request."

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URI into (mime_type, bytes).

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    match = _DATA_URI.match(uri.strip())
    if not match:
        raise ValueError("Invalid image data")
    # Line-wrapped (MIME style) base64 is accepted
    encoded = "".join(match.group("data").split())
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Invalid image data") from e
    return match.group("mime"), data


class ImageOrchestrator:
    """
    Image create/edit orchestrator.

    Usage:
        images = ImageOrchestrator(gemini_gateway)
        picture = await images.create("a red fox in snow", "16:9")
        result = await images.edit(picture.data, picture.mime_type, "make it night")
    """

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    async def create(self, prompt: str, aspect_ratio: str = "1:1") -> BinaryImage:
        """
        Generate a new image from a prompt.

        Raises:
            ValueError: Unsupported aspect ratio
            GenerationFailure: Model service failure
            NoImageReturned: The response had no image data
        """
        if aspect_ratio not in IMAGE_ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {aspect_ratio}")

        response = await self.gateway.send(
            GenerationRequest(
                model=settings.IMAGE_CREATE_MODEL,
                parts=[ContentPart.from_text(prompt)],
                aspect_ratio=aspect_ratio,
                image_size=settings.IMAGE_SIZE,
            )
        )

        if not response.binary_parts:
            logger.warning(f"Image model returned no image for prompt: {prompt[:50]}")
            raise NoImageReturned()

        first = response.binary_parts[0]
        return BinaryImage(mime_type=first.mime_type, data=first.data)

    async def edit(
        self,
        base_image: bytes,
        mime_type: str,
        prompt: str,
    ) -> Union[BinaryImage, TextResult]:
        """
        Send the current image plus an instruction in one request.

        Returns:
            BinaryImage when the model drew a new picture, otherwise a
            TextResult with its answer

        Raises:
            GenerationFailure: Model service failure
        """
        response = await self.gateway.send(
            GenerationRequest(
                model=settings.IMAGE_EDIT_MODEL,
                parts=[
                    ContentPart.from_bytes(base_image, mime_type),
                    ContentPart.from_text(prompt),
                ],
            )
        )

        if response.binary_parts:
            first = response.binary_parts[0]
            return BinaryImage(mime_type=first.mime_type, data=first.data)

        logger.info("Image edit answered with text instead of an image")
        return TextResult(content=response.text or EDIT_FALLBACK_TEXT)


class ImageWorkspace:
    """
    The caller's working image.

    Usage:
        workspace = ImageWorkspace()
        workspace.apply(await images.create("a cat"))
        note = workspace.apply(await images.edit(workspace.image.data, "image/png", "add a hat"))
        if note:
            print(f"AI Analysis/Edit Instructions: {note}")
    """

    def __init__(self, image: Optional[BinaryImage] = None):
        self.image = image

    def apply(self, payload: Union[BinaryImage, TextResult]) -> Optional[str]:
        """
        Take a create/edit result.

        Returns:
            None if the image was replaced, or the explanatory text of a
            text result (the image is left as it was)
        """
        if isinstance(payload, BinaryImage):
            self.image = payload
            return None
        return payload.content
