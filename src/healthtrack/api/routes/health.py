"""Health endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from healthtrack.api.dependencies import get_healthtrack_app

if TYPE_CHECKING:
    from healthtrack.app import Application

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str
    storage: str


async def _compute_health_response(app: Application) -> HealthResponse | JSONResponse:
    """Compute shared health payload for public and versioned health endpoints."""
    database_ok, storage_ok = await asyncio.gather(app.records.ping(), app.object_store.ping())

    if not database_ok:
        status = "unhealthy"
    elif storage_ok:
        status = "healthy"
    else:
        status = "degraded"

    response = HealthResponse(
        status=status,
        database="connected" if database_ok else "unavailable",
        storage="reachable" if storage_ok else "unavailable",
    )

    if not database_ok:
        return JSONResponse(status_code=503, content=response.model_dump(mode="json"))
    return response


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def get_root_health(
    app: Application = Depends(get_healthtrack_app),
) -> HealthResponse | JSONResponse:
    """Public liveness/readiness health check for ops checks."""
    return await _compute_health_response(app)


@router.get("/api/v1/health", response_model=HealthResponse)
async def get_health(
    app: Application = Depends(get_healthtrack_app),
) -> HealthResponse | JSONResponse:
    """Versioned health check endpoint."""
    return await _compute_health_response(app)
