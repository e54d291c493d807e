"""CLI entrypoint for the healthtrack service."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import fire  # type: ignore[import-untyped]

from healthtrack.api.openapi_export import write_openapi_schema
from healthtrack.app import Application
from healthtrack.config import ConfigError, load_config
from healthtrack.logging_setup import configure_logging


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for CLI."""
    configure_logging(log_level=level)


class HealthTrack:
    """healthtrack CLI - health record attachment service."""

    def serve(self, config: str, log_level: str = "INFO") -> None:
        """Run the API server.

        Args:
            config: Path to YAML config file
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        setup_logging(log_level)

        app = Application(Path(config))

        try:
            asyncio.run(app.run())
        except ConfigError as e:
            print(f"✗ Config invalid: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            pass  # Handled by signal handlers

    def validate(self, config: str) -> None:
        """Validate config file without running.

        Args:
            config: Path to YAML config file
        """
        config_path = Path(config)

        try:
            cfg = load_config(config_path)
        except ConfigError as e:
            print(f"✗ Config invalid: {e}", file=sys.stderr)
            sys.exit(1)

        attachments = cfg.attachments
        print(f"✓ Config valid: {config_path}")
        print(f"  Storage backend: {cfg.storage.backend}")
        if cfg.storage.s3 is not None:
            print(f"  Bucket: {cfg.storage.s3.bucket} ({cfg.storage.s3.region})")
        print(f"  Key prefix: {attachments.key_prefix}")
        print(f"  Max upload size: {attachments.max_size_bytes} bytes")
        print(f"  Allowed content types: {attachments.allowed_content_types}")
        print(f"  Upload URL TTL: {attachments.upload_url_ttl_s}s")
        print(f"  Read URL TTL: {attachments.read_url_ttl_s}s")

    def openapi(self, output: str) -> None:
        """Write the API's OpenAPI schema as JSON.

        Args:
            output: Output path for generated OpenAPI JSON
        """
        write_openapi_schema(Path(output))
        print(f"✓ OpenAPI schema written: {output}")


def main() -> None:
    """Main CLI entrypoint."""
    # Strip --help/-h when it's the only arg so Fire shows its commands list
    if len(sys.argv) == 2 and sys.argv[1] in ("--help", "-h"):
        sys.argv.pop()
    fire.Fire(HealthTrack)


if __name__ == "__main__":
    main()
