"""Record store implementations."""

from healthtrack.records.sqlalchemy import Base, Event, HealthTrack, SQLAlchemyRecordStore

__all__ = ["Base", "Event", "HealthTrack", "SQLAlchemyRecordStore"]
