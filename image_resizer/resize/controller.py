"""
Resize — controller layer.

Receives validated input from the router, calls the service, composes
the response. Thin glue layer between HTTP and business logic.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from image_resizer.resize import service
from image_resizer.resize.schemas import ResizeRequest, ResizeResponse

if TYPE_CHECKING:
    from image_resizer.resize.processor import OutputEncoder
    from image_resizer.storage import ObjectStorage


async def resize(
    request: ResizeRequest,
    storage: ObjectStorage,
    encoder: OutputEncoder,
) -> ResizeResponse:
    """Resize the referenced image, reusing an existing variant when present."""
    return await service.handle_resize(request, storage, encoder)
