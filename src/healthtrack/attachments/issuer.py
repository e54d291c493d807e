"""Upload authorization: validate a proposed upload and presign a PUT URL."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from healthtrack.attachments.keys import StorageKeyCodec
from healthtrack.errors import UpstreamStorageError, ValidationError
from healthtrack.models.attachment import UploadAuthorization, UploadRequest
from healthtrack.models.config import AttachmentsConfig

if TYPE_CHECKING:
    from healthtrack.interfaces import ObjectStore

logger = logging.getLogger(__name__)


def _format_size_limit(max_size: int) -> str:
    mib = max_size / (1024 * 1024)
    if mib.is_integer():
        return f"{max_size} bytes ({int(mib)}MB)"
    return f"{max_size} bytes"


class UploadAuthorizationIssuer:
    """Issues time-limited upload authorizations for event attachments.

    Issuing writes no state: if the client never uploads, or uploads and never
    confirms, nothing references the object.
    """

    def __init__(
        self,
        store: ObjectStore,
        codec: StorageKeyCodec,
        config: AttachmentsConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._codec = codec
        self._config = config or AttachmentsConfig()
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def allowed_content_types(self) -> list[str]:
        return list(self._config.allowed_content_types)

    def validate_request(self, file_name: Any, content_type: Any, size: Any) -> UploadRequest:
        """Check upload parameters in order: name, content type, size."""
        if not isinstance(file_name, str) or not file_name.strip():
            raise ValidationError(
                "fileName is required and must be a non-empty string",
                field="fileName",
            )

        allowed = self._config.allowed_content_types
        if not isinstance(content_type, str) or content_type not in allowed:
            raise ValidationError(
                f"contentType must be one of: {', '.join(allowed)}",
                field="contentType",
            )

        byte_size = _coerce_size(size)
        if byte_size is None:
            raise ValidationError(
                "size is required and must be a positive number",
                field="size",
            )
        max_size = self._config.max_size_bytes
        if byte_size > max_size:
            raise ValidationError(
                f"File size exceeds maximum of {_format_size_limit(max_size)}",
                field="size",
            )

        return UploadRequest(file_name=file_name.strip(), content_type=content_type, size=byte_size)

    async def authorize(self, owner_id: str, request: UploadRequest) -> UploadAuthorization:
        """Presign a PUT for a validated request.

        Raises UpstreamStorageError if signing fails.
        """
        key = self._codec.derive_key(owner_id, request.file_name)
        ttl_s = self._config.upload_url_ttl_s
        try:
            upload_url = await self._store.sign_upload(key, request.content_type, ttl_s)
        except Exception as exc:
            logger.error("Failed to sign upload URL for %s: %s", key, exc, exc_info=exc)
            raise UpstreamStorageError("sign_upload", key, exc) from exc

        expires_at = self._clock() + timedelta(seconds=ttl_s)
        logger.info(
            "Issued upload authorization for %s",
            key,
            extra={"content_type": request.content_type, "size": request.size},
        )
        return UploadAuthorization(
            upload_url=upload_url,
            file_url=self._codec.file_url(key),
            key=key,
            expires_at=expires_at,
            max_size=self._config.max_size_bytes,
            allowed_content_types=self.allowed_content_types,
        )

    async def issue(
        self,
        owner_id: str,
        file_name: Any,
        content_type: Any,
        size: Any,
    ) -> UploadAuthorization:
        request = self.validate_request(file_name, content_type, size)
        return await self.authorize(owner_id, request)


def _coerce_size(value: Any) -> int | None:
    """Return a positive whole byte count, or None if the value is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer() or value <= 0:
            return None
        return int(value)
    return None
