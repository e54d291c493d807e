"""Event attachment endpoints: upload authorization, confirmation and detach."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Body, Depends

from healthtrack.api.dependencies import get_event_scope, get_healthtrack_app
from healthtrack.api.routes.schemas import (
    EventResponse,
    UploadConfirmRequest,
    UploadUrlRequest,
    event_response,
    resolved_event_response,
)
from healthtrack.models.attachment import EventScope, UploadAuthorization

if TYPE_CHECKING:
    from healthtrack.app import Application

router = APIRouter(tags=["attachments"])
logger = logging.getLogger(__name__)

_EVENT_PATH = "/api/v1/users/{user_id}/tracks/{slug}/events/{event_id}"


@router.post(f"{_EVENT_PATH}/upload-url", response_model=UploadAuthorization)
async def create_upload_url(
    body: UploadUrlRequest = Body(default_factory=UploadUrlRequest),
    scope: EventScope = Depends(get_event_scope),
    app: Application = Depends(get_healthtrack_app),
) -> UploadAuthorization:
    """Issue a presigned PUT URL for the event's attachment."""
    request = app.issuer.validate_request(body.file_name, body.content_type, body.size)
    event = await app.records.require_event(scope)
    return await app.issuer.authorize(event.id, request)


@router.post(f"{_EVENT_PATH}/upload-confirm", response_model=EventResponse)
async def confirm_upload(
    body: UploadConfirmRequest = Body(default_factory=UploadConfirmRequest),
    scope: EventScope = Depends(get_event_scope),
    app: Application = Depends(get_healthtrack_app),
) -> EventResponse:
    """Bind an uploaded object to the event once storage confirms it exists."""
    event = await app.reconciler.confirm(scope, body.file_url, body.key)
    return await resolved_event_response(event, app.resolver)


@router.delete(f"{_EVENT_PATH}/attachment", response_model=EventResponse)
async def delete_attachment(
    scope: EventScope = Depends(get_event_scope),
    app: Application = Depends(get_healthtrack_app),
) -> EventResponse:
    """Delete the event's attachment from storage, then clear its reference."""
    event = await app.lifecycle.detach_attachment(scope)
    return event_response(event)
