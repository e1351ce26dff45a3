"""
Image processor — decode, resize under a fitting policy, re-encode.

Uses Pillow for image manipulation. Every scaling step uses the Lanczos
filter so that the same input always yields the same bytes.

Fitting policies (W x H = target box):
  cover     — scale until the box is covered, then center-crop to W x H
  contain   — scale until the image fits inside the box, keep aspect
  fill      — stretch to exactly W x H
  scaledown — pass through untouched if already inside the box,
              otherwise contain

Output encoding is a separate OutputEncoder value (JPEG by default) so the
format can change without touching the geometry.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from image_resizer.exceptions import ImageDecodeError, ImageEncodeError
from image_resizer.resize.constants import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OUTPUT_QUALITY,
    OUTPUT_FORMATS,
    SOURCE_CONTENT_TYPES,
    FitMode,
)

logger = logging.getLogger(__name__)

RESAMPLE_FILTER = Image.LANCZOS

_ALPHA_MODES = ("RGBA", "LA", "PA")
_JPEG_MODES = ("RGB", "L", "CMYK")


# ── Encoding ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OutputEncoder:
    """Re-encodes a resized image into one fixed raster format."""

    format: str
    content_type: str
    quality: int = DEFAULT_OUTPUT_QUALITY
    supports_alpha: bool = False

    def encode(self, image: Image.Image) -> bytes:
        try:
            prepared = self._prepare(image)
            buf = io.BytesIO()
            prepared.save(buf, format=self.format, quality=self.quality)
        except (OSError, ValueError, KeyError) as exc:
            raise ImageEncodeError(str(exc))
        return buf.getvalue()

    def _prepare(self, image: Image.Image) -> Image.Image:
        if image.mode in _ALPHA_MODES and not self.supports_alpha:
            # Composite onto white background
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if self.format == "JPEG" and image.mode not in _JPEG_MODES:
            return image.convert("RGB")
        return image


def encoder_for(format_name: str, quality: int = DEFAULT_OUTPUT_QUALITY) -> OutputEncoder:
    """Build an encoder from a configured format name (JPEG, PNG, WEBP)."""
    fmt = format_name.strip().upper()
    if fmt == "JPG":
        fmt = "JPEG"
    try:
        content_type, supports_alpha = OUTPUT_FORMATS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported output format: {format_name}")
    return OutputEncoder(
        format=fmt,
        content_type=content_type,
        quality=quality,
        supports_alpha=supports_alpha,
    )


JPEG_ENCODER = encoder_for(DEFAULT_OUTPUT_FORMAT)


# ── Geometry ─────────────────────────────────────────────────────────────────

def cover_size(width: int, height: int, box_width: int, box_height: int) -> tuple[int, int]:
    """Scaled size that fully covers the box before center-cropping."""
    img_ratio = width / height
    target_ratio = box_width / box_height

    if img_ratio > target_ratio:
        # Image is wider — width overflows
        scaled = (int(box_height * img_ratio), box_height)
    else:
        # Image is taller — height overflows
        scaled = (box_width, int(box_width / img_ratio))

    return max(scaled[0], box_width), max(scaled[1], box_height)


def contain_size(width: int, height: int, box_width: int, box_height: int) -> tuple[int, int]:
    """Largest aspect-preserving size that fits inside the box."""
    ratio = min(box_width / width, box_height / height)
    new_width = max(int(width * ratio + 0.5), 1)
    new_height = max(int(height * ratio + 0.5), 1)
    return min(new_width, box_width), min(new_height, box_height)


class ImageProcessor:
    """Decode a single image and resize it under one fitting policy."""

    def __init__(self, image_data: bytes) -> None:
        try:
            image = Image.open(io.BytesIO(image_data))
            image.load()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError,
                Image.DecompressionBombError) as exc:
            raise ImageDecodeError(str(exc))

        self.source_format: str | None = image.format

        # Palette / bilevel images resample with NEAREST in Pillow
        if image.mode in ("P", "PA"):
            has_alpha = image.mode == "PA" or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        elif image.mode == "1":
            image = image.convert("L")
        self._image = image

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def source_content_type(self) -> str | None:
        if self.source_format is None:
            return None
        # Multi-picture JPEGs from cameras open as MPO
        return SOURCE_CONTENT_TYPES.get(self.source_format, Image.MIME.get(self.source_format))

    def fits_within(self, width: int, height: int) -> bool:
        img_width, img_height = self._image.size
        return img_width <= width and img_height <= height

    def resize(self, width: int, height: int, mode: FitMode) -> Image.Image:
        """Return a new image resized under *mode*."""
        if mode == FitMode.COVER:
            return self._cover(width, height)
        if mode == FitMode.CONTAIN:
            return self._contain(width, height)
        if mode == FitMode.FILL:
            return self._fill(width, height)
        if mode == FitMode.SCALE_DOWN:
            return self._scale_down(width, height)
        raise ValueError(f"Unknown fit mode: {mode}")

    def _cover(self, width: int, height: int) -> Image.Image:
        """Scale to cover the box, then crop the overflow evenly."""
        scaled_width, scaled_height = cover_size(*self._image.size, width, height)
        scaled = self._image.resize((scaled_width, scaled_height), RESAMPLE_FILTER)

        left = max(scaled_width - width, 0) // 2
        top = max(scaled_height - height, 0) // 2
        return scaled.crop((left, top, left + width, top + height))

    def _contain(self, width: int, height: int) -> Image.Image:
        new_size = contain_size(*self._image.size, width, height)
        return self._image.resize(new_size, RESAMPLE_FILTER)

    def _fill(self, width: int, height: int) -> Image.Image:
        return self._image.resize((width, height), RESAMPLE_FILTER)

    def _scale_down(self, width: int, height: int) -> Image.Image:
        if self.fits_within(width, height):
            return self._image.copy()
        return self._contain(width, height)


def resize_image(
    image_data: bytes,
    width: int,
    height: int,
    mode: FitMode,
    encoder: OutputEncoder = JPEG_ENCODER,
) -> tuple[bytes, str]:
    """Resize encoded image bytes. Returns (output_bytes, content_type).

    Under scaledown an image already inside the box is returned as-is,
    with its own content type, so no re-encoding loss is introduced.
    """
    processor = ImageProcessor(image_data)

    if mode == FitMode.SCALE_DOWN and processor.fits_within(width, height):
        logger.info(
            "Image %sx%s already fits %sx%s, returning original bytes",
            *processor.size, width, height,
        )
        return image_data, processor.source_content_type or encoder.content_type

    resized = processor.resize(width, height, mode)
    logger.info(
        "Resized %sx%s -> %sx%s (mode=%s)",
        *processor.size, *resized.size, mode.value,
    )
    return encoder.encode(resized), encoder.content_type
