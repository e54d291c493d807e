"""Track endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Response, status

from healthtrack.api.dependencies import get_healthtrack_app, require_user

if TYPE_CHECKING:
    from healthtrack.app import Application

router = APIRouter(tags=["tracks"])


@router.delete(
    "/api/v1/users/{user_id}/tracks/{slug}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_track(
    slug: str,
    user_id: str = Depends(require_user),
    app: Application = Depends(get_healthtrack_app),
) -> Response:
    """Delete a track with all its events and (best-effort) their attachments."""
    await app.lifecycle.delete_track_and_attachments(user_id, slug)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
