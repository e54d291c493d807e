"""Object store backends."""

from __future__ import annotations

from healthtrack.interfaces import ObjectStore
from healthtrack.models.config import StorageConfig
from healthtrack.storage.s3 import S3ObjectStore


def create_object_store(config: StorageConfig) -> ObjectStore:
    """Create the configured object store backend."""
    match config.backend:
        case "s3":
            if config.s3 is None:
                raise ValueError("storage.s3 is required when backend=s3")
            return S3ObjectStore(config.s3)
        case _:
            raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = ["S3ObjectStore", "create_object_store"]
