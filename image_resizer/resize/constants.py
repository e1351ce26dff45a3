"""
Resize — static constants and enum types.
"""
import enum


class FitMode(str, enum.Enum):
    """How source pixels map into the target width x height box."""
    COVER = "cover"          # scale to cover, center-crop to exact size
    CONTAIN = "contain"      # scale to fit within, keep aspect, no padding
    FILL = "fill"            # stretch to exact size, ignore aspect
    SCALE_DOWN = "scaledown"  # like contain, but never upscale


class LocatorStyle(str, enum.Enum):
    """Which of the accepted address shapes a locator was written in."""
    NATIVE = "native"                  # s3://bucket/key
    PATH_STYLE = "path_style"          # https://s3.region.amazonaws.com/bucket/key
    VIRTUAL_HOSTED = "virtual_hosted"  # https://bucket.s3.region.amazonaws.com/key


NATIVE_SCHEME = "s3"
HTTP_SCHEMES = frozenset({"http", "https"})

# Path-style hosts start with one of these; virtual-hosted hosts contain
# one of them preceded by a dot.
STORAGE_HOST_MARKERS = ("s3.", "s3-")

# Variant key fallbacks when the original key has no stem / extension
DEFAULT_VARIANT_STEM = "image"
DEFAULT_VARIANT_EXTENSION = "jpg"

# Output encoders by Pillow format name: (content_type, supports_alpha)
OUTPUT_FORMATS: dict[str, tuple[str, bool]] = {
    "JPEG": ("image/jpeg", False),
    "PNG": ("image/png", True),
    "WEBP": ("image/webp", True),
}

DEFAULT_OUTPUT_FORMAT = "JPEG"
DEFAULT_OUTPUT_QUALITY = 75

# Pillow formats whose MIME type differs from what browsers expect
SOURCE_CONTENT_TYPES: dict[str, str] = {
    "MPO": "image/jpeg",
}

# Upper bound for a requested width or height, in pixels
MAX_DIMENSION = 10_000
