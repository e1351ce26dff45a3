from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from image_resizer.exceptions import StorageError
from image_resizer.main import app
from image_resizer.resize.dependencies import get_storage
from image_resizer.resize.locator import StorageLocator


class InMemoryStorage:
    """ObjectStorage fake that keeps objects in a dict and records every call."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.calls: list[tuple[str, str, str]] = []

    def put(self, bucket: str, key: str, data: bytes, content_type: str = "image/png") -> None:
        self.objects[(bucket, key)] = (data, content_type)

    def calls_to(self, name: str) -> list[tuple[str, str, str]]:
        return [c for c in self.calls if c[0] == name]

    async def exists(self, bucket: str, key: str) -> bool:
        self.calls.append(("exists", bucket, key))
        return (bucket, key) in self.objects

    async def fetch(self, locator: StorageLocator) -> bytes:
        self.calls.append(("fetch", locator.bucket, locator.key))
        try:
            return self.objects[(locator.bucket, locator.key)][0]
        except KeyError:
            raise StorageError(f"Object not found: {locator.uri}")

    async def store(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        self.calls.append(("store", bucket, key))
        self.objects[(bucket, key)] = (data, content_type)
        return f"s3://{bucket}/{key}"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def client(storage: InMemoryStorage) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
