"""SQLAlchemy implementation of RecordStore (PostgreSQL or SQLite)."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from healthtrack.db import create_async_engine_for_dsn
from healthtrack.errors import NotFoundError, PersistenceError
from healthtrack.interfaces import RecordStore
from healthtrack.models.attachment import EventScope
from healthtrack.models.enums import EventType
from healthtrack.models.records import EventLookup, EventRecord, TrackRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    pass


class HealthTrack(Base):
    """A user's track of related health events."""

    __tablename__ = "health_tracks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    slug: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_health_tracks_user_slug"),
        Index("idx_health_tracks_user_id", "user_id"),
    )


class Event(Base):
    """An event on a track; `file_url` holds the confirmed attachment reference."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    track_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("health_tracks.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    symptom_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    severity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_events_track_id", "track_id"),
        Index("idx_events_track_id_date", "track_id", "date"),
    )


def _track_record(row: Any) -> TrackRecord:
    return TrackRecord(
        id=row.id,
        user_id=row.user_id,
        slug=row.slug,
        title=row.title,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _event_record(row: Any) -> EventRecord:
    return EventRecord(
        id=row.id,
        track_id=row.track_id,
        date=row.date,
        type=EventType(row.type),
        title=row.title,
        notes=row.notes,
        file_url=row.file_url,
        symptom_type=row.symptom_type,
        severity=row.severity,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SQLAlchemyRecordStore(RecordStore):
    """Record store over an async SQLAlchemy engine.

    Every database failure surfaces as PersistenceError; nothing is retried
    or degraded here.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._engine: AsyncEngine | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("RecordStore not initialized")
        return self._engine

    async def initialize(self, *, create_schema: bool = False) -> None:
        """Create the connection pool and verify the database is reachable.

        Tables are normally created via alembic migrations; `create_schema`
        creates them directly (SQLite development and tests).
        """
        self._engine = create_async_engine_for_dsn(self._dsn)
        try:
            async with self._engine.begin() as conn:
                if create_schema:
                    await conn.run_sync(Base.metadata.create_all)
                await conn.execute(select(1))
        except SQLAlchemyError as exc:
            logger.error("Failed to initialize record store: %s", exc, exc_info=True)
            await self._engine.dispose()
            self._engine = None
            raise PersistenceError("initialize", exc) from exc
        logger.info("SQLAlchemyRecordStore initialized successfully")

    async def get_track(self, user_id: str, slug: str) -> TrackRecord | None:
        try:
            async with self.engine.connect() as conn:
                row = await self._select_track(conn, user_id, slug)
        except SQLAlchemyError as exc:
            raise PersistenceError("get_track", exc) from exc
        return None if row is None else _track_record(row)

    async def find_event(self, scope: EventScope) -> EventLookup:
        try:
            async with self.engine.connect() as conn:
                track = await self._select_track(conn, scope.user_id, scope.track_slug)
                if track is None:
                    return EventLookup(event=None, track_exists=False)
                result = await conn.execute(
                    select(Event).where(Event.id == scope.event_id, Event.track_id == track.id)
                )
                row = result.one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError("find_event", exc) from exc
        event = None if row is None else _event_record(row)
        return EventLookup(event=event, track_exists=True)

    async def list_events(self, user_id: str, slug: str, *, limit: int) -> list[EventRecord]:
        query = (
            select(Event)
            .join(HealthTrack, Event.track_id == HealthTrack.id)
            .where(HealthTrack.user_id == user_id, HealthTrack.slug == slug)
            .order_by(Event.date.desc(), Event.created_at.desc())
            .limit(max(1, int(limit)))
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(query)
                rows = result.all()
        except SQLAlchemyError as exc:
            raise PersistenceError("list_events", exc) from exc
        return [_event_record(row) for row in rows]

    async def list_track_file_urls(self, user_id: str, slug: str) -> list[str]:
        query = (
            select(Event.file_url)
            .join(HealthTrack, Event.track_id == HealthTrack.id)
            .where(
                HealthTrack.user_id == user_id,
                HealthTrack.slug == slug,
                Event.file_url.is_not(None),
            )
        )
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(query)
                return [str(url) for url in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise PersistenceError("list_track_file_urls", exc) from exc

    async def set_event_file_url(self, event_id: str, file_url: str | None) -> EventRecord:
        """Overwrite the attachment reference unconditionally (last write wins)."""
        stmt = (
            update(Event)
            .where(Event.id == event_id)
            .values(file_url=file_url, updated_at=_utcnow())
        )
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError.event()
                refreshed = await conn.execute(select(Event).where(Event.id == event_id))
                row = refreshed.one()
        except SQLAlchemyError as exc:
            raise PersistenceError("set_event_file_url", exc) from exc
        return _event_record(row)

    async def delete_event(self, event_id: str) -> bool:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(delete(Event).where(Event.id == event_id))
        except SQLAlchemyError as exc:
            raise PersistenceError("delete_event", exc) from exc
        return bool(result.rowcount)

    async def delete_track(self, track_id: str) -> bool:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(delete(HealthTrack).where(HealthTrack.id == track_id))
        except SQLAlchemyError as exc:
            raise PersistenceError("delete_track", exc) from exc
        return bool(result.rowcount)

    async def create_track(
        self,
        user_id: str,
        slug: str,
        title: str,
        *,
        description: str | None = None,
    ) -> TrackRecord:
        now = _utcnow()
        values: dict[str, Any] = {
            "id": _new_id(),
            "user_id": user_id,
            "slug": slug,
            "title": title,
            "description": description,
            "created_at": now,
            "updated_at": now,
        }
        try:
            async with self.engine.begin() as conn:
                await conn.execute(insert(HealthTrack).values(**values))
        except SQLAlchemyError as exc:
            raise PersistenceError("create_track", exc) from exc
        return TrackRecord.model_validate(values)

    async def create_event(
        self,
        track_id: str,
        *,
        title: str,
        type: EventType,
        notes: str | None = None,
        file_url: str | None = None,
        symptom_type: str | None = None,
        severity: int | None = None,
    ) -> EventRecord:
        now = _utcnow()
        values: dict[str, Any] = {
            "id": _new_id(),
            "track_id": track_id,
            "date": now,
            "type": str(type),
            "title": title,
            "notes": notes,
            "file_url": file_url,
            "symptom_type": symptom_type,
            "severity": severity,
            "created_at": now,
            "updated_at": now,
        }
        try:
            async with self.engine.begin() as conn:
                await conn.execute(insert(Event).values(**values))
        except SQLAlchemyError as exc:
            raise PersistenceError("create_event", exc) from exc
        return EventRecord.model_validate(values)

    async def ping(self) -> bool:
        """Health check. Returns True if database is reachable, False otherwise."""
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(select(1))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e, exc_info=True)
            return False

    async def shutdown(self, timeout: float | None = None) -> None:
        """Close connection pool."""
        _ = timeout
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("SQLAlchemyRecordStore closed")

    @staticmethod
    async def _select_track(conn: AsyncConnection, user_id: str, slug: str) -> Any | None:
        result = await conn.execute(
            select(HealthTrack).where(HealthTrack.user_id == user_id, HealthTrack.slug == slug)
        )
        return result.one_or_none()
