"""S3 object store backend using presigned URLs."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from healthtrack.interfaces import ObjectStore
from healthtrack.models.attachment import ObjectMetadata
from healthtrack.models.config import S3StorageConfig

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStore):
    """S3 (or S3-compatible, e.g. MinIO/LocalStack) object store.

    Only signs URLs and checks or deletes objects; attachment bytes travel
    directly between the client and the bucket. All boto3 calls are blocking
    and run in a worker thread.

    Credentials are read from the configured env vars when both are set,
    otherwise boto3's default credential chain applies.
    """

    def __init__(self, config: S3StorageConfig, client: Any | None = None) -> None:
        self.bucket = config.bucket
        self.client = client or self._create_client(config)
        self._shutdown_called = False

        logger.info(
            "S3ObjectStore initialized: bucket=%s region=%s endpoint=%s",
            self.bucket,
            config.region,
            config.endpoint_url or "aws",
        )

    def _create_client(self, config: S3StorageConfig) -> Any:
        addressing_style = "path" if config.force_path_style else "auto"
        boto_config = BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": addressing_style},
        )
        access_key = os.getenv(config.access_key_id_env)
        secret_key = os.getenv(config.secret_access_key_env)
        credentials: dict[str, str] = {}
        if access_key and secret_key:
            credentials = {
                "aws_access_key_id": access_key,
                "aws_secret_access_key": secret_key,
            }
        return boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            region_name=config.region,
            config=boto_config,
            **credentials,
        )

    async def sign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        """Presign a PUT bound to this key and content type."""
        self._ensure_open()
        return await asyncio.to_thread(
            self.client.generate_presigned_url,
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=expires_in,
        )

    async def sign_read(self, key: str, expires_in: int) -> str:
        self._ensure_open()
        return await asyncio.to_thread(
            self.client.generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    async def head_object(self, key: str) -> ObjectMetadata:
        self._ensure_open()
        try:
            response = await asyncio.to_thread(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise FileNotFoundError(f"Object not found: {key}") from exc
            raise

        etag = response.get("ETag")
        return ObjectMetadata(
            key=key,
            size=response.get("ContentLength"),
            content_type=response.get("ContentType"),
            etag=etag.strip('"') if isinstance(etag, str) else None,
        )

    async def delete_object(self, key: str) -> None:
        """Delete an object.

        Idempotent: S3 reports success for missing keys, and NoSuchKey from
        compatible stores is treated the same way.
        """
        self._ensure_open()
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return
            raise
        logger.debug("Deleted from S3: %s", key)

    async def ping(self) -> bool:
        """Health check - verify the bucket is reachable."""
        try:
            await asyncio.to_thread(self.client.head_bucket, Bucket=self.bucket)
            return True
        except Exception as e:
            logger.warning("S3 ping failed: %s", e, exc_info=True)
            return False

    async def shutdown(self, timeout: float | None = None) -> None:
        _ = timeout
        if self._shutdown_called:
            return

        self._shutdown_called = True
        close = getattr(self.client, "close", None)
        if callable(close):
            await asyncio.to_thread(close)
        logger.info("S3ObjectStore closed")

    def _ensure_open(self) -> None:
        if self._shutdown_called:
            raise RuntimeError("Object store has been shut down")
