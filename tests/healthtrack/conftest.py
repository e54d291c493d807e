"""Shared pytest fixtures for healthtrack tests."""

from __future__ import annotations

import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Add src to sys.path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path.resolve()) not in sys.path:
    sys.path.insert(0, str(src_path.resolve()))

import pytest

from healthtrack.attachments import StorageKeyCodec
from healthtrack.models.config import S3StorageConfig
from healthtrack.models.enums import EventType
from healthtrack.records import SQLAlchemyRecordStore
from tests.healthtrack.mocks import (
    BUCKET,
    REGION,
    TRACK_SLUG,
    USER_ID,
    MockObjectStore,
    MockRecordStore,
    SeededEvent,
)


@pytest.fixture
def s3_config() -> S3StorageConfig:
    return S3StorageConfig(bucket=BUCKET, region=REGION)


@pytest.fixture
def codec(s3_config: S3StorageConfig) -> StorageKeyCodec:
    return StorageKeyCodec(s3_config)


@pytest.fixture
def object_store() -> MockObjectStore:
    return MockObjectStore()


@pytest.fixture
def records() -> MockRecordStore:
    return MockRecordStore()


@pytest.fixture
async def seeded(records: MockRecordStore) -> SeededEvent:
    """A track owned by USER_ID with one event that has no attachment."""
    track = await records.create_track(USER_ID, TRACK_SLUG, "Sleep")
    event = await records.create_event(track.id, title="Bad night", type=EventType.NOTE)
    return SeededEvent(track=track, event=event)


@pytest.fixture
async def record_store() -> AsyncGenerator[SQLAlchemyRecordStore, None]:
    """SQLAlchemy record store on a fresh in-memory SQLite database."""
    store = SQLAlchemyRecordStore("sqlite+aiosqlite:///:memory:")
    await store.initialize(create_schema=True)
    yield store
    await store.shutdown()
