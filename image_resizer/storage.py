"""
Object storage port used by the resize flow.

Keep this small and SDK-agnostic so tests can supply an in-memory fake.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from image_resizer.resize.locator import StorageLocator


class ObjectStorage(Protocol):
    """Minimal interface to check, read and write objects in a bucket.

    ``exists`` never raises: any failure is reported as "not there".
    ``fetch`` and ``store`` raise StorageError on failure.
    """

    async def exists(self, bucket: str, key: str) -> bool: ...

    async def fetch(self, locator: StorageLocator) -> bytes: ...

    async def store(self, bucket: str, key: str, data: bytes, content_type: str) -> str: ...


__all__ = ["ObjectStorage"]
