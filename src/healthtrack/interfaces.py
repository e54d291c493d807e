"""Interface definitions for healthtrack collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from healthtrack.errors import NotFoundError

if TYPE_CHECKING:
    from healthtrack.models.attachment import EventScope, ObjectMetadata
    from healthtrack.models.enums import EventType
    from healthtrack.models.records import EventLookup, EventRecord, TrackRecord


class Shutdownable(ABC):
    """Async shutdown interface for managed components."""

    @abstractmethod
    async def shutdown(self, timeout: float | None = None) -> None:
        """Release resources."""
        raise NotImplementedError


class ObjectStore(Shutdownable, ABC):
    """Bucket holding attachment bytes, addressed by storage key.

    The API process never moves bytes through this interface: uploads and
    downloads go directly between the client and the store via presigned URLs.
    """

    @abstractmethod
    async def sign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        """Return a URL authorizing one PUT of `key` with the given content type."""
        raise NotImplementedError

    @abstractmethod
    async def sign_read(self, key: str, expires_in: int) -> str:
        """Return a URL authorizing GET of `key` for `expires_in` seconds."""
        raise NotImplementedError

    @abstractmethod
    async def head_object(self, key: str) -> ObjectMetadata:
        """Fetch object metadata without transferring the body.

        Raises FileNotFoundError if the object does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_object(self, key: str) -> None:
        """Delete an object from storage.

        Must be idempotent: deleting a missing object should succeed.
        """
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:
        """Health check. Returns True if the bucket is reachable."""
        raise NotImplementedError


class RecordStore(Shutdownable, ABC):
    """Tracks and events owned by users.

    Implementations raise PersistenceError when the database call fails.
    """

    @abstractmethod
    async def get_track(self, user_id: str, slug: str) -> TrackRecord | None:
        """Return the user's track with this slug, or None."""
        raise NotImplementedError

    @abstractmethod
    async def find_event(self, scope: EventScope) -> EventLookup:
        """Look up an event inside the user's track."""
        raise NotImplementedError

    @abstractmethod
    async def list_events(self, user_id: str, slug: str, *, limit: int) -> list[EventRecord]:
        """List events of a track, newest first. Returns [] for an unknown track."""
        raise NotImplementedError

    @abstractmethod
    async def list_track_file_urls(self, user_id: str, slug: str) -> list[str]:
        """Return every non-null attachment reference on the track's events."""
        raise NotImplementedError

    @abstractmethod
    async def set_event_file_url(self, event_id: str, file_url: str | None) -> EventRecord:
        """Overwrite the event's attachment reference and return the updated record."""
        raise NotImplementedError

    @abstractmethod
    async def delete_event(self, event_id: str) -> bool:
        """Delete the event row. Returns False if it was already gone."""
        raise NotImplementedError

    @abstractmethod
    async def delete_track(self, track_id: str) -> bool:
        """Delete the track row; its events cascade."""
        raise NotImplementedError

    @abstractmethod
    async def create_track(
        self,
        user_id: str,
        slug: str,
        title: str,
        *,
        description: str | None = None,
    ) -> TrackRecord:
        raise NotImplementedError

    @abstractmethod
    async def create_event(
        self,
        track_id: str,
        *,
        title: str,
        type: EventType,
        notes: str | None = None,
        file_url: str | None = None,
        symptom_type: str | None = None,
        severity: int | None = None,
    ) -> EventRecord:
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> bool:
        """Health check. Returns True if the database is reachable."""
        raise NotImplementedError

    async def require_event(self, scope: EventScope) -> EventRecord:
        """Return the scoped event or raise NotFoundError naming what is missing."""
        lookup = await self.find_event(scope)
        if not lookup.track_exists:
            raise NotFoundError.track()
        if lookup.event is None:
            raise NotFoundError.event()
        return lookup.event
