"""Configuration models."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_ALLOWED_CONTENT_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
)
DEFAULT_PRESIGNED_URL_TTL_S = 900


class S3StorageConfig(BaseModel):
    """S3 (or S3-compatible) bucket holding attachment bytes."""

    bucket: str
    region: str = "us-east-1"
    endpoint_url: str | None = None
    public_base_url: str | None = None
    force_path_style: bool = False
    access_key_id_env: str = "AWS_ACCESS_KEY_ID"
    secret_access_key_env: str = "AWS_SECRET_ACCESS_KEY"

    @field_validator("bucket")
    @classmethod
    def _validate_bucket(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or "/" in cleaned:
            raise ValueError(f"Invalid bucket name: {value!r}")
        return cleaned

    @field_validator("endpoint_url", "public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None


class StorageConfig(BaseModel):
    """Object store backend configuration."""

    backend: str = "s3"
    s3: S3StorageConfig | None = None

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @model_validator(mode="after")
    def _validate_backend(self) -> StorageConfig:
        match self.backend:
            case "s3":
                if self.s3 is None:
                    raise ValueError(
                        "storage.s3 is required when backend=s3. "
                        "Add 'storage.s3' section to your config."
                    )
            case _:
                raise ValueError(f"Unknown storage backend: '{self.backend}'. Available: s3")
        return self


class StateStoreConfig(BaseModel):
    """Record store configuration."""

    dsn_env: str | None = "DB_DSN"
    dsn: str | None = None


class AttachmentsConfig(BaseModel):
    """Upload policy and presigned URL lifetimes."""

    key_prefix: str = "events"
    max_size_bytes: int = Field(default=DEFAULT_MAX_FILE_SIZE_BYTES, ge=1)
    allowed_content_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_CONTENT_TYPES)
    )
    upload_url_ttl_s: int = Field(default=DEFAULT_PRESIGNED_URL_TTL_S, ge=1, le=604800)
    read_url_ttl_s: int = Field(default=DEFAULT_PRESIGNED_URL_TTL_S, ge=1, le=604800)

    @field_validator("key_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        cleaned = value.strip("/")
        if not cleaned or ".." in cleaned.split("/"):
            raise ValueError(f"Invalid key_prefix: {value!r}")
        return cleaned

    @field_validator("allowed_content_types")
    @classmethod
    def _validate_content_types(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("allowed_content_types must not be empty")
        return value


class FastAPIServerConfig(BaseModel):
    """HTTP API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    auth_enabled: bool = False
    api_key_env: str = "HEALTHTRACK_API_KEY"
    user_header: str = "X-User-Id"

    def get_api_key(self) -> str | None:
        return os.environ.get(self.api_key_env)


class Config(BaseModel):
    """Main configuration."""

    version: int = 1
    storage: StorageConfig
    state_store: StateStoreConfig = Field(default_factory=StateStoreConfig)
    attachments: AttachmentsConfig = Field(default_factory=AttachmentsConfig)
    server: FastAPIServerConfig = Field(default_factory=FastAPIServerConfig)
