"""Create health_tracks and events tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from __future__ import annotations

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "health_tracks",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("slug", sa.String(length=128), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "slug", name="uq_health_tracks_user_slug"),
    )
    op.create_index("idx_health_tracks_user_id", "health_tracks", ["user_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "track_id",
            sa.String(length=64),
            sa.ForeignKey("health_tracks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("symptom_type", sa.String(length=64), nullable=True),
        sa.Column("severity", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_events_track_id", "events", ["track_id"])
    op.create_index("idx_events_track_id_date", "events", ["track_id", "date"])


def downgrade() -> None:
    op.drop_index("idx_events_track_id_date", table_name="events")
    op.drop_index("idx_events_track_id", table_name="events")
    op.drop_table("events")
    op.drop_index("idx_health_tracks_user_id", table_name="health_tracks")
    op.drop_table("health_tracks")
