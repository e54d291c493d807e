"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from healthtrack.config import ConfigError, ConfigErrorCode, load_config, load_config_from_dict
from healthtrack.models.config import AttachmentsConfig, S3StorageConfig


def _base() -> dict[str, Any]:
    return {"storage": {"backend": "s3", "s3": {"bucket": "health-bucket"}}}


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    # Given: A minimal YAML file
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(_base()))

    # When
    config = load_config(path)

    # Then
    assert config.storage.s3 is not None
    assert config.storage.s3.region == "us-east-1"
    assert config.attachments.max_size_bytes == 10 * 1024 * 1024
    assert config.attachments.upload_url_ttl_s == 900
    assert config.server.user_header == "X-User-Id"


def test_example_config_is_valid() -> None:
    # Given: The shipped example
    path = Path(__file__).resolve().parents[2] / "config" / "example.yaml"

    # When
    config = load_config(path)

    # Then
    assert config.storage.backend == "s3"


@pytest.mark.parametrize(
    ("content", "code"),
    [
        (None, ConfigErrorCode.FILE_NOT_FOUND),
        ("", ConfigErrorCode.EMPTY_FILE),
        ("storage: [unclosed", ConfigErrorCode.YAML_INVALID),
        ("- a\n- b\n", ConfigErrorCode.ROOT_NOT_MAPPING),
        ("version: 1\n", ConfigErrorCode.VALIDATION_FAILED),
    ],
)
def test_load_config_error_codes(tmp_path: Path, content: str | None, code: ConfigErrorCode) -> None:
    # Given
    path = tmp_path / "config.yaml"
    if content is not None:
        path.write_text(content)

    # When / Then
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == code


def test_unknown_backend_is_rejected() -> None:
    # When / Then
    with pytest.raises(ConfigError) as exc_info:
        load_config_from_dict({"storage": {"backend": "ftp"}})
    assert "Unknown storage backend" in str(exc_info.value)


def test_malformed_content_types_rejected() -> None:
    # Given
    data = _base()
    data["attachments"] = {"allowed_content_types": ["application/pdf", "pdf"]}

    # When / Then
    with pytest.raises(ConfigError) as exc_info:
        load_config_from_dict(data)
    assert exc_info.value.code == ConfigErrorCode.CONTENT_TYPES_INVALID


def test_auth_enabled_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    # Given: Auth on without the key in the environment
    monkeypatch.delenv("HEALTHTRACK_API_KEY", raising=False)
    data = _base()
    data["server"] = {"auth_enabled": True}

    # When / Then
    with pytest.raises(ConfigError) as exc_info:
        load_config_from_dict(data)
    assert exc_info.value.code == ConfigErrorCode.ENV_VAR_MISSING


def test_s3_urls_are_normalized() -> None:
    # When
    config = S3StorageConfig(
        bucket=" b ",
        endpoint_url="http://localhost:9000/",
        public_base_url="https://cdn.example.com/",
    )

    # Then
    assert config.bucket == "b"
    assert config.endpoint_url == "http://localhost:9000"
    assert config.public_base_url == "https://cdn.example.com"


@pytest.mark.parametrize("prefix", ["", "/", "a/../b"])
def test_invalid_key_prefix(prefix: str) -> None:
    with pytest.raises(ValueError):
        AttachmentsConfig(key_prefix=prefix)

