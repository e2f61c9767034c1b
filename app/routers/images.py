"""
Image Studio Router - create and edit images.

Errors are task-oriented here: a failed generation is reported as an
HTTP error so the operator sees it, instead of being dressed up as a
reply.

    NoImageReturned   → 422
    GenerationFailure → 502
    bad data URI      → 400
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.ai.errors import GenerationFailure, NoImageReturned
from app.deps import get_image_orchestrator
from app.schemas.media import ImageCreateRequest, ImageEditRequest, ImageResponse
from app.services.image_service import ImageOrchestrator, decode_data_uri

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


@router.post("/create", response_model=ImageResponse)
async def create_image(
    request: ImageCreateRequest,
    orchestrator: ImageOrchestrator = Depends(get_image_orchestrator),
):
    try:
        payload = await orchestrator.create(request.prompt, request.aspect_ratio)
    except NoImageReturned as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except GenerationFailure as e:
        logger.error(f"Image generation failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to process image request.")

    return ImageResponse.from_payload(payload)


@router.post("/edit", response_model=ImageResponse)
async def edit_image(
    request: ImageEditRequest,
    orchestrator: ImageOrchestrator = Depends(get_image_orchestrator),
):
    """
    Edit the current image.

    The response `kind` tells the client what to do: "binary" replaces
    the picture, "text" is an explanation and the picture stays.
    """
    try:
        mime_type, data = decode_data_uri(request.image)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        payload = await orchestrator.edit(data, mime_type, request.prompt)
    except GenerationFailure as e:
        logger.error(f"Image edit failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to process image request.")

    return ImageResponse.from_payload(payload)
