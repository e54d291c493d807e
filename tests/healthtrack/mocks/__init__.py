"""Mock implementations for testing."""

from tests.healthtrack.mocks.object_store import SIGNED_HOST, MockObjectStore
from tests.healthtrack.mocks.record_store import MockRecordStore
from tests.healthtrack.mocks.seed import (
    BUCKET,
    BUCKET_BASE_URL,
    REGION,
    TRACK_SLUG,
    USER_ID,
    SeededEvent,
)

__all__ = [
    "BUCKET",
    "BUCKET_BASE_URL",
    "REGION",
    "SIGNED_HOST",
    "TRACK_SLUG",
    "USER_ID",
    "MockObjectStore",
    "MockRecordStore",
    "SeededEvent",
]
