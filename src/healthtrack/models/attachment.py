"""Attachment protocol data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class EventScope:
    """Owner scope of an event: the authenticated user, the track slug and the event id."""

    user_id: str
    track_slug: str
    event_id: str


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """Upload parameters that passed validation."""

    file_name: str
    content_type: str
    size: int


@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Metadata returned by an object store HEAD request (no body transfer)."""

    key: str
    size: int | None = None
    content_type: str | None = None
    etag: str | None = None


class UploadAuthorization(BaseModel):
    """Time-limited permission to upload one object directly to the store.

    Ephemeral: built per request and never persisted. Expiry is enforced by the
    object store itself.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    upload_url: str
    file_url: str
    key: str
    expires_at: datetime
    max_size: int
    allowed_content_types: list[str]
