"""Turn stored attachment references into time-limited read URLs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from healthtrack.attachments.keys import StorageKeyCodec
from healthtrack.errors import UpstreamStorageError

if TYPE_CHECKING:
    from healthtrack.interfaces import ObjectStore

logger = logging.getLogger(__name__)


class PresignedAccessResolver:
    """Resolves attachment references for display. Never fails the caller.

    References that do not point into the bucket (legacy or external links)
    come back unchanged. A signing failure degrades to the stored reference.
    """

    def __init__(self, store: ObjectStore, codec: StorageKeyCodec, *, ttl_s: int = 900) -> None:
        self._store = store
        self._codec = codec
        self._ttl_s = ttl_s

    async def sign_read(self, key: str) -> str | UpstreamStorageError:
        try:
            return await self._store.sign_read(key, self._ttl_s)
        except Exception as exc:
            return UpstreamStorageError("sign_read", key, exc)

    async def resolve(self, stored_url: str) -> str:
        key = self._codec.parse_key(stored_url)
        if key is None:
            return stored_url

        match await self.sign_read(key):
            case UpstreamStorageError() as err:
                logger.warning(
                    "Failed to presign read URL for %s (returning stored URL): %s",
                    key,
                    err.cause,
                )
                return stored_url
            case str() as signed_url:
                return signed_url
            case other:
                raise TypeError(f"Unexpected sign_read result type: {type(other).__name__}")

    async def resolve_optional(self, stored_url: str | None) -> str | None:
        if stored_url is None:
            return None
        return await self.resolve(stored_url)

    async def resolve_many(self, stored_urls: Sequence[str | None]) -> list[str | None]:
        """Resolve a page of references concurrently, preserving order."""
        return list(await asyncio.gather(*(self.resolve_optional(url) for url in stored_urls)))
