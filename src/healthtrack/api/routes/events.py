"""Event read and delete endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Response, status

from healthtrack.api.dependencies import get_event_scope, get_healthtrack_app, require_user
from healthtrack.api.routes.schemas import (
    EventListResponse,
    EventResponse,
    event_response,
    resolved_event_response,
)
from healthtrack.errors import NotFoundError
from healthtrack.models.attachment import EventScope

if TYPE_CHECKING:
    from healthtrack.app import Application

router = APIRouter(tags=["events"])

DEFAULT_EVENT_LIMIT = 100
MAX_EVENT_LIMIT = 1000


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_EVENT_LIMIT
    return max(1, min(MAX_EVENT_LIMIT, limit))


@router.get("/api/v1/users/{user_id}/tracks/{slug}/events", response_model=EventListResponse)
async def list_events(
    slug: str,
    limit: int | None = Query(default=None),
    user_id: str = Depends(require_user),
    app: Application = Depends(get_healthtrack_app),
) -> EventListResponse:
    """List a track's events, newest first, with attachment read URLs."""
    if await app.records.get_track(user_id, slug) is None:
        raise NotFoundError.track()

    page_limit = clamp_limit(limit)
    events = await app.records.list_events(user_id, slug, limit=page_limit)
    file_urls = await app.resolver.resolve_many([event.file_url for event in events])
    return EventListResponse(
        events=[
            event_response(event, file_url)
            for event, file_url in zip(events, file_urls, strict=True)
        ],
        limit=page_limit,
    )


@router.get("/api/v1/users/{user_id}/tracks/{slug}/events/{event_id}", response_model=EventResponse)
async def get_event(
    scope: EventScope = Depends(get_event_scope),
    app: Application = Depends(get_healthtrack_app),
) -> EventResponse:
    event = await app.records.require_event(scope)
    return await resolved_event_response(event, app.resolver)


@router.delete(
    "/api/v1/users/{user_id}/tracks/{slug}/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_event(
    scope: EventScope = Depends(get_event_scope),
    app: Application = Depends(get_healthtrack_app),
) -> Response:
    """Delete an event; its attachment is removed from storage best-effort."""
    await app.lifecycle.delete_event_and_attachment(scope)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
