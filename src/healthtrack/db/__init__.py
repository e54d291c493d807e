"""Database helpers for SQLite and PostgreSQL support."""

from healthtrack.db.dialect import DialectHelper, detect_dialect_from_dsn
from healthtrack.db.engine import create_async_engine_for_dsn

__all__ = [
    "DialectHelper",
    "create_async_engine_for_dsn",
    "detect_dialect_from_dsn",
]
