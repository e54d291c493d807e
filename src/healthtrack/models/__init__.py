"""healthtrack data models."""

from healthtrack.models.attachment import (
    EventScope,
    ObjectMetadata,
    UploadAuthorization,
    UploadRequest,
)
from healthtrack.models.config import (
    AttachmentsConfig,
    Config,
    FastAPIServerConfig,
    S3StorageConfig,
    StateStoreConfig,
    StorageConfig,
)
from healthtrack.models.enums import AttachmentState, EventType
from healthtrack.models.records import EventLookup, EventRecord, TrackRecord

__all__ = [
    "AttachmentState",
    "AttachmentsConfig",
    "Config",
    "EventLookup",
    "EventRecord",
    "EventScope",
    "EventType",
    "FastAPIServerConfig",
    "ObjectMetadata",
    "S3StorageConfig",
    "StateStoreConfig",
    "StorageConfig",
    "TrackRecord",
    "UploadAuthorization",
    "UploadRequest",
]
