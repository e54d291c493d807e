"""Tests for canonical API error handlers and domain error mapping."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from healthtrack.api.errors import APIErrorCode, api_error_from_domain, register_exception_handlers
from healthtrack.errors import (
    HealthTrackError,
    NotFoundError,
    PersistenceError,
    UpstreamStorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "status_code", "code"),
    [
        (ValidationError("bad", field="size"), 400, APIErrorCode.VALIDATION_FAILED),
        (NotFoundError.track(), 404, APIErrorCode.TRACK_NOT_FOUND),
        (NotFoundError.event(), 404, APIErrorCode.EVENT_NOT_FOUND),
        (NotFoundError.object_not_uploaded(), 404, APIErrorCode.ATTACHMENT_NOT_UPLOADED),
        (UpstreamStorageError("sign_upload", "k", RuntimeError("x")), 502, APIErrorCode.STORAGE_UNAVAILABLE),
        (PersistenceError("set_event_file_url", RuntimeError("x")), 500, APIErrorCode.PERSISTENCE_FAILED),
        (HealthTrackError("other"), 500, APIErrorCode.INTERNAL_SERVER_ERROR),
    ],
)
def test_domain_errors_map_to_status(error: HealthTrackError, status_code: int, code: str) -> None:
    # When
    api_error = api_error_from_domain(error)

    # Then
    assert api_error.status_code == status_code
    assert api_error.error_code == code


def test_storage_error_detail_hides_key() -> None:
    # Given: An upstream failure naming a storage key
    error = UpstreamStorageError("delete_object", "events/e1/secret.pdf", RuntimeError("boom"))

    # When
    api_error = api_error_from_domain(error)

    # Then: The client sees a generic message
    assert "secret.pdf" not in str(api_error)


def test_validation_error_envelope_names_field() -> None:
    # Given: A route raising a domain validation error
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/bad")
    async def _bad() -> None:
        raise ValidationError("size is required and must be a positive number", field="size")

    client = TestClient(app)

    # When
    response = client.get("/bad")

    # Then
    assert response.status_code == 400
    assert response.json() == {
        "detail": "size is required and must be a positive number",
        "error_code": "VALIDATION_FAILED",
        "field": "size",
    }


def test_http_exception_is_normalized() -> None:
    # Given
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/gone")
    async def _gone() -> None:
        raise HTTPException(status_code=404, detail="nothing here")

    client = TestClient(app)

    # When
    response = client.get("/gone")

    # Then
    assert response.json() == {"detail": "nothing here", "error_code": "NOT_FOUND"}


def test_unhandled_exception_maps_to_internal_server_error_envelope() -> None:
    # Given
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/crash")
    async def _crash() -> None:
        raise RuntimeError("unexpected failure")

    client = TestClient(app, raise_server_exceptions=False)

    # When
    response = client.get("/crash")

    # Then
    assert response.status_code == 500
    assert response.json() == {
        "detail": "Internal server error",
        "error_code": "INTERNAL_SERVER_ERROR",
    }
