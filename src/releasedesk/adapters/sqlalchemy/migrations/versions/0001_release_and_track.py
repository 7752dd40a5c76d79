"""Create release and track tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from releasedesk.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

RELEASE_STATUSES = ("DRAFT", "PROCESSING", "PENDING_REVIEW", "PUBLISHED", "REJECTED")


def upgrade() -> None:
    op.create_table(
        "release",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("artist_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("genre", sa.String(length=80), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*RELEASE_STATUSES, name="releasestatus", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("cover_art_object_key", sa.String(), nullable=True),
        sa.Column("cover_art_public_url", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_release"),
    )
    op.create_index("ix_release_status_created_at", "release", ["status", "created_at"])
    op.create_index("ix_release_artist_id", "release", ["artist_id"])

    op.create_table(
        "track",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("release_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("isrc", sa.String(length=12), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("audio_object_key", sa.String(), nullable=True),
        sa.Column("audio_public_url", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["release_id"],
            ["release.id"],
            name="fk_track_release_id_release",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_track"),
        sa.UniqueConstraint("isrc", name="uq_track_isrc"),
    )
    op.create_index("ix_track_release_id", "track", ["release_id"])


def downgrade() -> None:
    op.drop_index("ix_track_release_id", table_name="track")
    op.drop_table("track")
    op.drop_index("ix_release_artist_id", table_name="release")
    op.drop_index("ix_release_status_created_at", table_name="release")
    op.drop_table("release")
