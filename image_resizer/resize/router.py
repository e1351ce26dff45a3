"""
Resize — HTTP routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from image_resizer.resize import controller
from image_resizer.resize.dependencies import get_encoder, get_storage
from image_resizer.resize.processor import OutputEncoder
from image_resizer.resize.schemas import ResizeRequest, ResizeResponse
from image_resizer.storage import ObjectStorage

router = APIRouter(tags=["resize"])


@router.post(
    "/resize",
    response_model=ResizeResponse,
    summary="Resize an image stored in S3",
    description=(
        "Downloads the image at s3_url, resizes it to width x height using "
        "object_mode (cover, contain, fill, scaledown) and uploads the result "
        "next to the original as {stem}_{width}x{height}.{ext}. If that variant "
        "already exists it is returned without reprocessing."
    ),
)
async def resize_image(
    request: ResizeRequest,
    storage: ObjectStorage = Depends(get_storage),
    encoder: OutputEncoder = Depends(get_encoder),
) -> ResizeResponse:
    return await controller.resize(request, storage, encoder)
