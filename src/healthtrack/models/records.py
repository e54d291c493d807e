"""Track and event record snapshots returned by the record store."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from healthtrack.models.enums import AttachmentState, EventType


class TrackRecord(BaseModel):
    """A user's health track (e.g. Sleep, Pain)."""

    id: str
    user_id: str
    slug: str
    title: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class EventRecord(BaseModel):
    """An event on a track; `file_url` is its single optional attachment pointer."""

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

    @property
    def attachment_state(self) -> AttachmentState:
        if self.file_url is None:
            return AttachmentState.NONE
        return AttachmentState.CONFIRMED


class EventLookup(BaseModel):
    """Result of looking an event up inside a user's track."""

    event: EventRecord | None
    track_exists: bool
