"""SQLAlchemy mapping metadata for the releasedesk domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from releasedesk.domain.model import Release, ReleaseStatus, Track

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

release_table = Table(
    "release",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("artist_id", UUIDColumnType, nullable=False),
    Column("title", String(200), nullable=False),
    Column("genre", String(80), nullable=False),
    Column(
        "status",
        Enum(ReleaseStatus, native_enum=False, length=20),
        nullable=False,
        default=ReleaseStatus.DRAFT,
    ),
    Column("cover_art_object_key", String, nullable=True),
    Column("cover_art_public_url", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_release_status_created_at", "status", "created_at"),
    Index("ix_release_artist_id", "artist_id"),
)

track_table = Table(
    "track",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "release_id",
        UUIDColumnType,
        ForeignKey("release.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", String(200), nullable=False),
    Column("isrc", String(12), nullable=False),
    Column("duration_seconds", Integer, nullable=True),
    Column("audio_object_key", String, nullable=True),
    Column("audio_public_url", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    UniqueConstraint("isrc", name="uq_track_isrc"),
    Index("ix_track_release_id", "release_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Release, release_table)
    mapper_registry.map_imperatively(Track, track_table)

    configure_mappers()
    return mapper_registry

