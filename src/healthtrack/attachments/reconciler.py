"""Confirm a client-side upload and bind it to its event."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from healthtrack.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from healthtrack.interfaces import ObjectStore, RecordStore
    from healthtrack.models.attachment import EventScope
    from healthtrack.models.records import EventRecord

logger = logging.getLogger(__name__)


class ConfirmationReconciler:
    """Verifies that an uploaded object exists, then records its reference.

    The object store is the source of truth for whether an upload happened;
    the client's claim is never trusted on its own. Confirmation overwrites
    any previous reference without deleting the old object.
    """

    def __init__(self, store: ObjectStore, records: RecordStore) -> None:
        self._store = store
        self._records = records

    async def confirm(self, scope: EventScope, file_url: Any, key: Any) -> EventRecord:
        if not isinstance(file_url, str) or not file_url.strip():
            raise ValidationError("fileUrl is required and must be a non-empty string", field="fileUrl")
        if not isinstance(key, str) or not key.strip():
            raise ValidationError("key is required and must be a non-empty string", field="key")
        key = key.strip()

        event = await self._records.require_event(scope)

        try:
            metadata = await self._store.head_object(key)
        except Exception as exc:
            logger.warning("Upload confirmation failed, object %s not found: %s", key, exc)
            raise NotFoundError.object_not_uploaded(cause=exc) from exc

        updated = await self._records.set_event_file_url(event.id, file_url)
        logger.info(
            "Confirmed attachment for event %s: %s",
            event.id,
            key,
            extra={"size": metadata.size, "content_type": metadata.content_type},
        )
        return updated
