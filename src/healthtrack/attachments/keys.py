"""Storage key derivation and the key <-> URL codec."""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import quote, unquote, urlsplit

from healthtrack.models.config import S3StorageConfig

_URL_SCHEMES = ("http", "https")


def _sanitize_segment(value: str) -> str:
    cleaned = value.strip().replace("/", "_").replace("\\", "_")
    cleaned = "_".join(part for part in cleaned.split() if part)
    if cleaned in ("", ".", ".."):
        return "unknown"
    return cleaned


def _normalize_key(path: PurePosixPath) -> str:
    if path.is_absolute():
        raise ValueError(f"storage key must be relative, got {path}")
    for part in path.parts:
        if part in ("", ".", ".."):
            raise ValueError(f"storage key contains invalid segment: {path}")
    return str(path)


def _base_url(config: S3StorageConfig) -> str:
    if config.public_base_url:
        return config.public_base_url
    if config.endpoint_url:
        if config.force_path_style:
            return f"{config.endpoint_url}/{config.bucket}"
        endpoint = urlsplit(config.endpoint_url)
        return f"{endpoint.scheme}://{config.bucket}.{endpoint.netloc}{endpoint.path}"
    return f"https://{config.bucket}.s3.{config.region}.amazonaws.com"


class StorageKeyCodec:
    """Derives storage keys and converts between keys and attachment URLs.

    Keys look like ``<prefix>/<eventId>/<fileName>``. The stored attachment
    reference is the object's public-style URL; `parse_key` is its inverse and
    the single place where a stored reference is turned back into a key.
    """

    def __init__(self, config: S3StorageConfig, *, key_prefix: str = "events") -> None:
        self._prefix = key_prefix
        self._base_url = _base_url(config)
        base = urlsplit(self._base_url)
        self._base_host = base.netloc.lower()
        self._base_path = base.path.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    def derive_key(self, owner_id: str, file_name: str) -> str:
        path = PurePosixPath(self._prefix) / _sanitize_segment(owner_id) / _sanitize_segment(file_name)
        return _normalize_key(path)

    def file_url(self, key: str) -> str:
        return f"{self._base_url}/{quote(key, safe='/')}"

    def parse_key(self, url: object) -> str | None:
        """Extract the storage key from an attachment URL.

        Query string and fragment are ignored, so presigned URLs parse as well.
        Returns None for anything that does not point into the bucket.
        """
        if not isinstance(url, str) or not url.strip():
            return None
        try:
            parts = urlsplit(url.strip())
        except ValueError:
            return None
        if parts.scheme.lower() not in _URL_SCHEMES:
            return None
        if parts.netloc.lower() != self._base_host:
            return None

        prefix = f"{self._base_path}/"
        if not parts.path.startswith(prefix):
            return None
        key = unquote(parts.path[len(prefix) :])
        if not key or key.startswith("/"):
            return None
        return key
