"""
AWS S3 utilities — object existence checks, downloads and uploads.

Implements the ObjectStorage port over aioboto3. A client is opened per
call from a session built out of Settings; empty credentials fall back to
the default boto credential chain (env vars, instance profile, ...).
Set S3_ENDPOINT_URL to talk to MinIO or LocalStack instead of AWS.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from image_resizer.exceptions import StorageError
from image_resizer.resize.constants import NATIVE_SCHEME

if TYPE_CHECKING:
    from image_resizer.config import Settings
    from image_resizer.resize.locator import StorageLocator

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


def _s3_session(settings: Settings) -> aioboto3.Session:
    return aioboto3.Session(
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        region_name=settings.aws_region,
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3Storage:
    """S3-backed object storage."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._session = _s3_session(settings)

    def _client(self):
        return self._session.client(
            "s3", endpoint_url=self._settings.s3_endpoint_url or None,
        )

    async def exists(self, bucket: str, key: str) -> bool:
        """HEAD the object. Any failure counts as "does not exist"."""
        logger.info("Checking if object exists: bucket=%s, key=%s", bucket, key)
        try:
            async with self._client() as s3:
                await s3.head_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) not in _NOT_FOUND_CODES:
                logger.warning(
                    "head_object failed for s3://%s/%s, treating as missing: %s",
                    bucket, key, exc,
                )
            logger.info("Object does not exist: bucket=%s, key=%s", bucket, key)
            return False
        except BotoCoreError as exc:
            logger.warning(
                "head_object failed for s3://%s/%s, treating as missing: %s",
                bucket, key, exc,
            )
            return False
        logger.info("Object exists: bucket=%s, key=%s", bucket, key)
        return True

    async def fetch(self, locator: StorageLocator) -> bytes:
        logger.info("Downloading from S3: bucket=%s, key=%s", locator.bucket, locator.key)
        try:
            async with self._client() as s3:
                response = await s3.get_object(Bucket=locator.bucket, Key=locator.key)
                async with response["Body"] as body:
                    return await body.read()
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise StorageError(f"Object not found: {locator.uri}")
            raise StorageError(f"Failed to download from S3: {exc}")
        except BotoCoreError as exc:
            raise StorageError(f"Failed to download from S3: {exc}")

    async def store(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        logger.info("Uploading to S3: bucket=%s, key=%s", bucket, key)
        try:
            async with self._client() as s3:
                await s3.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                    CacheControl=self._settings.s3_cache_control,
                )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload to S3: {exc}")
        return f"{NATIVE_SCHEME}://{bucket}/{key}"
