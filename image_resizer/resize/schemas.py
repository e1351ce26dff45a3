"""
Resize — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_resizer.resize.constants import FitMode


# ── Base ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
    )


# ── Requests ─────────────────────────────────────────────────────────────────

class ResizeRequest(_Base):
    """Resize an image stored in S3 and store the result next to it."""
    s3_url: str = Field(
        min_length=1,
        max_length=2048,
        description="s3://bucket/key, path-style or virtual-hosted S3 URL",
    )
    # Positivity is checked by the resize service so that callers get
    # an invalid_request error rather than a schema error.
    width: int = Field(description="Target width in pixels (> 0)")
    height: int = Field(description="Target height in pixels (> 0)")
    object_mode: FitMode = Field(
        default=FitMode.COVER,
        description="cover, contain, fill or scaledown",
    )

    @field_validator("object_mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("_", "").replace("-", "")
        return value


# ── Responses ────────────────────────────────────────────────────────────────

class ResizeResponse(_Base):
    """Where the original and the resized image live."""
    original_url: str
    resized_url: str
    width: int
    height: int
    object_mode: FitMode


class HealthResponse(_Base):
    status: str
    service: str
