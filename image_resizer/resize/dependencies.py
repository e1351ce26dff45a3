"""
Resize — FastAPI dependencies.

Tests override ``get_storage`` with an in-memory fake.
"""
from fastapi import Depends

from image_resizer.config import Settings, get_settings
from image_resizer.resize.processor import OutputEncoder, encoder_for
from image_resizer.s3 import S3Storage
from image_resizer.storage import ObjectStorage


def get_storage(settings: Settings = Depends(get_settings)) -> ObjectStorage:
    return S3Storage(settings)


def get_encoder(settings: Settings = Depends(get_settings)) -> OutputEncoder:
    return encoder_for(settings.output_format, settings.output_quality)


__all__ = ["get_storage", "get_encoder"]
