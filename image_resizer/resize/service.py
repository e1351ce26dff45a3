"""
Resize — request orchestration.

Zero FastAPI imports. Receives the request, a storage backend and an
output encoder via parameters. Fully testable with an in-memory storage.

Flow per request:
  validate -> resolve locator -> derive variant key -> exists?
    yes: return the existing variant (nothing fetched, nothing written)
    no:  fetch original -> resize -> store variant -> return it

Any failure aborts the request; nothing is retried.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from image_resizer.exceptions import InvalidRequest
from image_resizer.resize.constants import MAX_DIMENSION
from image_resizer.resize.locator import StorageLocator, derive_variant_key, parse_locator
from image_resizer.resize.processor import JPEG_ENCODER, OutputEncoder, resize_image
from image_resizer.resize.schemas import ResizeRequest, ResizeResponse

if TYPE_CHECKING:
    from image_resizer.storage import ObjectStorage

logger = logging.getLogger(__name__)


def validate_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidRequest()
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise InvalidRequest(
            f"Width and height must not exceed {MAX_DIMENSION} pixels."
        )


async def handle_resize(
    request: ResizeRequest,
    storage: ObjectStorage,
    encoder: OutputEncoder = JPEG_ENCODER,
) -> ResizeResponse:
    """Resize the image at ``request.s3_url`` and return where the result lives."""
    logger.info(
        "Resize request: url=%s, width=%s, height=%s, mode=%s",
        request.s3_url, request.width, request.height, request.object_mode.value,
    )

    validate_dimensions(request.width, request.height)
    source = parse_locator(request.s3_url)
    variant = StorageLocator(
        bucket=source.bucket,
        key=derive_variant_key(source.key, request.width, request.height),
    )

    if await storage.exists(variant.bucket, variant.key):
        logger.info("Resized image already exists at %s, returning cached URL", variant.uri)
        return _result(request, variant.uri)

    image_data = await storage.fetch(source)

    # Pillow is CPU-bound → offload to thread
    loop = asyncio.get_running_loop()
    resized_data, content_type = await loop.run_in_executor(
        None,
        lambda: resize_image(
            image_data, request.width, request.height, request.object_mode, encoder,
        ),
    )

    resized_url = await storage.store(
        variant.bucket, variant.key, resized_data, content_type,
    )
    logger.info("Successfully resized and uploaded image to %s", resized_url)
    return _result(request, resized_url)


def _result(request: ResizeRequest, resized_url: str) -> ResizeResponse:
    return ResizeResponse(
        original_url=request.s3_url,
        resized_url=resized_url,
        width=request.width,
        height=request.height,
        object_mode=request.object_mode,
    )
