"""Attachment removal: explicit detach and cascading deletes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from healthtrack.attachments.keys import StorageKeyCodec
from healthtrack.errors import NotFoundError, UpstreamStorageError, ValidationError

if TYPE_CHECKING:
    from healthtrack.interfaces import ObjectStore, RecordStore
    from healthtrack.models.attachment import EventScope
    from healthtrack.models.records import EventRecord

logger = logging.getLogger(__name__)


class AttachmentLifecycleManager:
    """Removes attachments from storage and records.

    Explicit detach is strict: a storage failure leaves the record untouched.
    Event and track deletion are best-effort on storage and always remove the
    records, accepting an orphaned object over a failed delete.
    """

    def __init__(self, store: ObjectStore, records: RecordStore, codec: StorageKeyCodec) -> None:
        self._store = store
        self._records = records
        self._codec = codec

    async def detach_attachment(self, scope: EventScope) -> EventRecord:
        event = await self._records.require_event(scope)
        if not event.file_url:
            raise ValidationError("Event has no attachment to delete", field="fileUrl")

        key = self._codec.parse_key(event.file_url)
        if key is None:
            raise ValidationError("Invalid file URL", field="fileUrl")

        try:
            await self._store.delete_object(key)
        except Exception as exc:
            logger.error("Failed to delete attachment %s: %s", key, exc, exc_info=exc)
            raise UpstreamStorageError("delete_object", key, exc) from exc

        updated = await self._records.set_event_file_url(event.id, None)
        logger.info("Detached attachment %s from event %s", key, event.id)
        return updated

    async def delete_event_and_attachment(self, scope: EventScope) -> None:
        event = await self._records.require_event(scope)
        if event.file_url is not None:
            key = self._codec.parse_key(event.file_url)
            if key is not None:
                match await self.delete_object_best_effort(key):
                    case UpstreamStorageError() as err:
                        logger.warning(
                            "Attachment delete failed for event %s (continuing): %s",
                            event.id,
                            err.cause,
                        )
                    case None:
                        pass

        await self._records.delete_event(event.id)
        logger.info("Deleted event %s", event.id)

    async def delete_track_and_attachments(self, user_id: str, slug: str) -> int:
        """Delete a track, its events and (best-effort) their attachments.

        Returns the number of storage objects removed.
        """
        track = await self._records.get_track(user_id, slug)
        if track is None:
            raise NotFoundError.track()

        removed = 0
        for file_url in await self._records.list_track_file_urls(user_id, slug):
            key = self._codec.parse_key(file_url)
            if key is None:
                continue
            match await self.delete_object_best_effort(key):
                case UpstreamStorageError() as err:
                    logger.warning(
                        "Attachment delete failed for track %s (continuing): %s",
                        track.id,
                        err.cause,
                    )
                case None:
                    removed += 1

        await self._records.delete_track(track.id)
        logger.info("Deleted track %s (%d attachments removed)", track.id, removed)
        return removed

    async def delete_object_best_effort(self, key: str) -> UpstreamStorageError | None:
        try:
            await self._store.delete_object(key)
        except Exception as exc:
            return UpstreamStorageError("delete_object", key, exc)
        return None
