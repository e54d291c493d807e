"""Request and response bodies shared by the user-scoped routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from healthtrack.attachments import PresignedAccessResolver
from healthtrack.models.enums import EventType
from healthtrack.models.records import EventRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadUrlRequest(CamelModel):
    # Left untyped so malformed values reach the issuer's field checks.
    file_name: Any = None
    content_type: Any = None
    size: Any = None


class UploadConfirmRequest(CamelModel):
    file_url: Any = None
    key: Any = None


class EventResponse(CamelModel):
    id: str
    track_id: str
    date: datetime
    type: EventType
    title: str
    notes: str | None = None
    file_url: str | None = None
    symptom_type: str | None = None
    severity: int | None = None
    created_at: datetime
    updated_at: datetime


class EventListResponse(CamelModel):
    events: list[EventResponse]
    limit: int


def event_response(event: EventRecord, file_url: str | None = None) -> EventResponse:
    return EventResponse(
        id=event.id,
        track_id=event.track_id,
        date=event.date,
        type=event.type,
        title=event.title,
        notes=event.notes,
        file_url=file_url,
        symptom_type=event.symptom_type,
        severity=event.severity,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


async def resolved_event_response(
    event: EventRecord, resolver: PresignedAccessResolver
) -> EventResponse:
    """Serialize an event with its attachment reference turned into a read URL."""
    return event_response(event, await resolver.resolve_optional(event.file_url))
