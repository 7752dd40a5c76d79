"""SQLAlchemy adapter package for releasedesk."""

from __future__ import annotations

from .mappings import mapper_registry, release_table, start_mappers, track_table
from .repositories import SqlAlchemyReleaseRepository, SqlAlchemyTrackRepository
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    build_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyReleaseRepository",
    "SqlAlchemyTrackRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "build_engine",
    "mapper_registry",
    "release_table",
    "shutdown",
    "start_mappers",
    "startup",
    "track_table",
]
