"""Dialect-specific database configuration.

Keeps the PostgreSQL/SQLite differences the record store cares about in one
place: async driver selection, pool settings and connection setup.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.pool import StaticPool


class DialectHelper:
    """Encapsulates database dialect-specific configuration.

    Create an instance via the factory methods:
        dialect = DialectHelper.from_dsn(dsn)
    """

    def __init__(self, dialect_name: str) -> None:
        if dialect_name not in ("postgresql", "sqlite"):
            raise ValueError(f"Unsupported dialect: {dialect_name}")

        self._dialect_name = dialect_name
        self._is_postgres = dialect_name == "postgresql"
        self._is_sqlite = dialect_name == "sqlite"

    @classmethod
    def from_dsn(cls, dsn: str) -> DialectHelper:
        return cls(detect_dialect_from_dsn(dsn))

    @property
    def dialect_name(self) -> str:
        return self._dialect_name

    @property
    def is_postgres(self) -> bool:
        return self._is_postgres

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    def get_engine_kwargs(self, dsn: str | None = None) -> dict[str, Any]:
        """Get dialect-appropriate engine configuration.

        In-memory SQLite gets a single shared connection so every session
        sees the same database.
        """
        if self._is_postgres:
            return {
                "pool_size": 5,
                "max_overflow": 0,
                "pool_pre_ping": True,
            }
        engine_kwargs: dict[str, Any] = {
            "pool_pre_ping": True,
        }
        if dsn is not None and self._is_sqlite_memory_dsn(dsn):
            engine_kwargs.update(
                {
                    "poolclass": StaticPool,
                    "connect_args": {"check_same_thread": False},
                }
            )
        return engine_kwargs

    @staticmethod
    def _is_sqlite_memory_dsn(dsn: str) -> bool:
        return ":memory:" in dsn

    @staticmethod
    def normalize_dsn(dsn: str) -> str:
        """Normalize DSN to use the async driver (asyncpg / aiosqlite)."""
        if dsn.startswith("postgresql://") and "+asyncpg" not in dsn:
            return dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
        if dsn.startswith("postgres://") and "+asyncpg" not in dsn:
            return dsn.replace("postgres://", "postgresql+asyncpg://", 1)

        if dsn.startswith("sqlite://") and "+aiosqlite" not in dsn:
            return dsn.replace("sqlite://", "sqlite+aiosqlite://", 1)

        return dsn


def detect_dialect_from_dsn(dsn: str) -> str:
    """Detect database dialect ("postgresql" or "sqlite") from a DSN string."""
    dsn_lower = dsn.lower()
    if dsn_lower.startswith(("postgresql://", "postgres://", "postgresql+asyncpg://")):
        return "postgresql"
    if dsn_lower.startswith(("sqlite://", "sqlite+aiosqlite://")):
        return "sqlite"
    raise ValueError(f"Cannot detect dialect from DSN: {dsn}")
