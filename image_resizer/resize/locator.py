"""
Storage addressing — locator parsing and variant key derivation.

Accepted locator shapes:
  s3://bucket/key                                   (native)
  https://s3.region.amazonaws.com/bucket/key        (path-style)
  https://bucket.s3.region.amazonaws.com/key        (virtual-hosted)

Shapes are tried in a fixed order. Path-style ("host starts with s3.")
is tested before virtual-hosted ("host contains .s3."), so a host that
satisfies both is read as path-style.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import SplitResult, unquote, urlsplit

from image_resizer.exceptions import InvalidLocator
from image_resizer.resize.constants import (
    DEFAULT_VARIANT_EXTENSION,
    DEFAULT_VARIANT_STEM,
    HTTP_SCHEMES,
    NATIVE_SCHEME,
    STORAGE_HOST_MARKERS,
    LocatorStyle,
)


@dataclass(frozen=True)
class StorageLocator:
    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"{NATIVE_SCHEME}://{self.bucket}/{self.key}"

    def __str__(self) -> str:
        return self.uri


# ── Shape detection ──────────────────────────────────────────────────────────

def _host(url: SplitResult) -> str:
    return (url.hostname or "").lower()


def _is_native(url: SplitResult) -> bool:
    return url.scheme == NATIVE_SCHEME


def _is_path_style(url: SplitResult) -> bool:
    return url.scheme in HTTP_SCHEMES and _host(url).startswith(STORAGE_HOST_MARKERS)


def _is_virtual_hosted(url: SplitResult) -> bool:
    host = _host(url)
    return url.scheme in HTTP_SCHEMES and any(
        f".{marker}" in host for marker in STORAGE_HOST_MARKERS
    )


# Order matters: first match wins.
_STYLE_CHAIN: tuple[tuple[LocatorStyle, Callable[[SplitResult], bool]], ...] = (
    (LocatorStyle.NATIVE, _is_native),
    (LocatorStyle.PATH_STYLE, _is_path_style),
    (LocatorStyle.VIRTUAL_HOSTED, _is_virtual_hosted),
)


def _split(raw: str) -> SplitResult:
    try:
        url = urlsplit(raw.strip())
    except ValueError as exc:
        raise InvalidLocator(f"Invalid URL format: {exc}")
    if not url.scheme:
        raise InvalidLocator("Invalid URL format: missing scheme")
    return url


def _style_of(url: SplitResult) -> LocatorStyle:
    if url.scheme != NATIVE_SCHEME and url.scheme not in HTTP_SCHEMES:
        raise InvalidLocator("URL must use s3://, https://, or http:// scheme")
    for style, matches in _STYLE_CHAIN:
        if matches(url):
            return style
    raise InvalidLocator("URL does not appear to be a valid S3 URL")


def classify_locator(raw: str) -> LocatorStyle:
    """Return which accepted shape *raw* is written in."""
    return _style_of(_split(raw))


# ── Bucket / key extraction ──────────────────────────────────────────────────

def _key_from_path(path: str) -> str:
    return unquote(path).lstrip("/")


def _extract_native(url: SplitResult) -> tuple[str, str]:
    # s3:// URIs are literal; only HTTP URLs are percent-encoded
    return url.netloc, url.path.lstrip("/")


def _extract_path_style(url: SplitResult) -> tuple[str, str]:
    parts = url.path.lstrip("/").split("/", 1)
    if len(parts) < 2:
        raise InvalidLocator("Invalid path-style S3 URL format")
    return unquote(parts[0]), _key_from_path(parts[1])


def _extract_virtual_hosted(url: SplitResult) -> tuple[str, str]:
    host = _host(url)
    cut = min(
        host.index(f".{marker}")
        for marker in STORAGE_HOST_MARKERS
        if f".{marker}" in host
    )
    return host[:cut], _key_from_path(url.path)


_EXTRACTORS: dict[LocatorStyle, Callable[[SplitResult], tuple[str, str]]] = {
    LocatorStyle.NATIVE: _extract_native,
    LocatorStyle.PATH_STYLE: _extract_path_style,
    LocatorStyle.VIRTUAL_HOSTED: _extract_virtual_hosted,
}


def parse_locator(raw: str) -> StorageLocator:
    """Parse an s3://, path-style or virtual-hosted URL into bucket and key.

    Raises InvalidLocator for unsupported schemes, non-S3 hosts, or a
    missing bucket / key.
    """
    url = _split(raw)
    bucket, key = _EXTRACTORS[_style_of(url)](url)
    if not bucket:
        raise InvalidLocator("Missing bucket name")
    if not key:
        raise InvalidLocator("Missing object key")
    return StorageLocator(bucket=bucket, key=key)


# ── Variant keys ─────────────────────────────────────────────────────────────

def derive_variant_key(original_key: str, width: int, height: int) -> str:
    """Build the storage key for a resized copy of *original_key*.

    ``photos/cat.png`` at 100x200 becomes ``photos/cat_100x200.png``;
    a key with no extension gets ``.jpg``.
    """
    path = PurePosixPath(original_key)
    stem = path.stem
    extension = path.suffix.lstrip(".")

    filename = (
        f"{stem or DEFAULT_VARIANT_STEM}_{width}x{height}."
        f"{extension or DEFAULT_VARIANT_EXTENSION}"
    )

    parent = str(path.parent)
    if parent in ("", ".", "/"):
        return filename
    return f"{parent.lstrip('/')}/{filename}"
