"""FastAPI dependency helpers."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from fastapi import Depends, Request, status

from healthtrack.api.errors import APIError, APIErrorCode
from healthtrack.logging_setup import set_user_id
from healthtrack.models.attachment import EventScope

if TYPE_CHECKING:
    from healthtrack.app import Application

DB_PING_CACHE_TTL_S = 0.5
logger = logging.getLogger(__name__)


@dataclass
class _DatabasePingCache:
    last_check_monotonic: float = 0.0
    last_ok: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def _get_database_ping_cache(app: Application) -> _DatabasePingCache:
    cache = cast(_DatabasePingCache | None, getattr(app, "_db_ping_cache", None))
    if cache is None:
        cache = _DatabasePingCache()
        cast(Any, app)._db_ping_cache = cache
    return cache


async def get_healthtrack_app(request: Request) -> Application:
    """Get the Application instance from request state."""
    app = cast("Application | None", getattr(request.app.state, "healthtrack", None))
    if app is None:
        raise APIError(
            "Application not initialized",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code=APIErrorCode.APP_NOT_INITIALIZED,
        )
    return app


async def verify_api_key(request: Request, app: Application = Depends(get_healthtrack_app)) -> None:
    """Verify the service API key if authentication is enabled."""
    server_config = app.config.server
    if not server_config.auth_enabled:
        return

    api_key = _require_api_key_value(app)

    token = _parse_bearer_token(request)
    if token is None or not secrets.compare_digest(token, api_key):
        raise APIError(
            "Unauthorized",
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=APIErrorCode.UNAUTHORIZED,
        )


async def require_database(app: Application = Depends(get_healthtrack_app)) -> None:
    """Ensure the database is reachable for data endpoints."""
    cache = _get_database_ping_cache(app)
    now = time.monotonic()

    if now - cache.last_check_monotonic > DB_PING_CACHE_TTL_S:
        async with cache.lock:
            now = time.monotonic()
            if now - cache.last_check_monotonic > DB_PING_CACHE_TTL_S:
                cache.last_ok = await app.records.ping()
                cache.last_check_monotonic = now

    if not cache.last_ok:
        raise APIError(
            "Database unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code=APIErrorCode.DB_UNAVAILABLE,
        )


async def require_user(
    request: Request,
    user_id: str,
    app: Application = Depends(get_healthtrack_app),
) -> str:
    """Resolve the acting user from the trusted identity header.

    The header is set by the upstream session layer. A user id in the path
    that differs from the acting user is reported as not found, so other
    users' resources are indistinguishable from missing ones.
    """
    acting_user = request.headers.get(app.config.server.user_header, "").strip()
    if not acting_user:
        raise APIError(
            "Unauthorized",
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=APIErrorCode.UNAUTHORIZED,
        )
    set_user_id(acting_user)
    if acting_user != user_id:
        logger.info("Rejected cross-user access to path=%s", request.url.path)
        raise APIError(
            "Not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=APIErrorCode.NOT_FOUND,
        )
    return acting_user


async def get_event_scope(
    slug: str,
    event_id: str,
    user_id: str = Depends(require_user),
) -> EventScope:
    return EventScope(user_id=user_id, track_slug=slug, event_id=event_id)


def _require_api_key_value(app: Application) -> str:
    api_key = app.config.server.get_api_key()
    if not api_key:
        raise APIError(
            "API key not configured",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=APIErrorCode.API_KEY_NOT_CONFIGURED,
        )
    return api_key


def _parse_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header.removeprefix("Bearer ").strip()
