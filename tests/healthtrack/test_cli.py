"""Tests for CLI module."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import yaml

from healthtrack.cli import HealthTrack, setup_logging
from healthtrack.config import ConfigError


def _minimal_config() -> dict[str, object]:
    return {
        "version": 1,
        "storage": {
            "backend": "s3",
            "s3": {"bucket": "health-bucket", "region": "eu-west-2"},
        },
        "state_store": {"dsn": "sqlite+aiosqlite:///:memory:"},
    }


class TestSetupLogging:
    def test_configures_logging_with_default_level(self) -> None:
        # When
        with patch("healthtrack.cli.configure_logging") as mock_configure:
            setup_logging()

        # Then
        mock_configure.assert_called_once_with(log_level="INFO")


class TestValidate:
    """Tests for validate command."""

    def test_validate_valid_config(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        # Given: A valid config file
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump(_minimal_config()))

        # When
        HealthTrack().validate(str(config_path))

        # Then: Summary printed with defaults applied
        out = capsys.readouterr().out
        assert "✓ Config valid" in out
        assert "Bucket: health-bucket (eu-west-2)" in out
        assert "Max upload size: 10485760 bytes" in out

    def test_validate_invalid_config_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        # Given: Storage section missing
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"version": 1}))

        # When / Then
        with pytest.raises(SystemExit) as exc_info:
            HealthTrack().validate(str(config_path))
        assert exc_info.value.code == 1
        assert "✗ Config invalid" in capsys.readouterr().err


class TestServe:
    """Tests for serve command."""

    def test_serve_config_error_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        # Given: An Application that fails on config
        mock_app = MagicMock()
        mock_app.run = AsyncMock(side_effect=ConfigError("Test error"))

        with (
            patch("healthtrack.cli.setup_logging"),
            patch("healthtrack.cli.Application", return_value=mock_app),
        ):
            # When / Then
            with pytest.raises(SystemExit) as exc_info:
                HealthTrack().serve(str(tmp_path / "config.yaml"))

        assert exc_info.value.code == 1
        assert "Test error" in capsys.readouterr().err

    def test_serve_keyboard_interrupt_handled(self, tmp_path: Path) -> None:
        # Given
        mock_app = MagicMock()
        mock_app.run = AsyncMock(side_effect=KeyboardInterrupt())

        with (
            patch("healthtrack.cli.setup_logging"),
            patch("healthtrack.cli.Application", return_value=mock_app),
        ):
            # When / Then: Returns without raising
            HealthTrack().serve(str(tmp_path / "config.yaml"))

        mock_app.run.assert_awaited_once()


class TestOpenAPI:
    def test_writes_schema(self, tmp_path: Path) -> None:
        # Given
        output = tmp_path / "nested" / "openapi.json"

        # When
        HealthTrack().openapi(str(output))

        # Then: Attachment routes are part of the contract
        schema = json.loads(output.read_text())
        paths = schema["paths"]
        assert "/api/v1/users/{user_id}/tracks/{slug}/events/{event_id}/upload-url" in paths
        assert "/api/v1/users/{user_id}/tracks/{slug}/events/{event_id}/upload-confirm" in paths
        assert "/health" not in paths
