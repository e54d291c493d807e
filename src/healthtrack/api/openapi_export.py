"""OpenAPI schema export helpers for client generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from healthtrack.api.server import create_contract_app


def build_openapi_schema() -> dict[str, Any]:
    """Build the OpenAPI schema from the registered API contract."""
    app = create_contract_app()
    return app.openapi()


def write_openapi_schema(output_path: Path) -> None:
    """Write the OpenAPI schema to disk using deterministic JSON formatting."""
    schema = build_openapi_schema()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(schema, indent=2, sort_keys=True, ensure_ascii=True) + "\n",
        encoding="utf-8",
    )
