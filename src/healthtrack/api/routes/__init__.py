"""API route registration."""

from __future__ import annotations

from fastapi import Depends, FastAPI

from healthtrack.api.dependencies import require_database, verify_api_key
from healthtrack.api.routes import attachments, events, health, tracks


def register_routes(app: FastAPI) -> None:
    """Register all API routers."""
    app.include_router(health.router)
    app.include_router(
        attachments.router,
        dependencies=[Depends(verify_api_key), Depends(require_database)],
    )
    app.include_router(
        events.router,
        dependencies=[Depends(verify_api_key), Depends(require_database)],
    )
    app.include_router(
        tracks.router,
        dependencies=[Depends(verify_api_key), Depends(require_database)],
    )
