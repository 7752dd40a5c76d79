"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ReleaseRepository, Repository, TrackRepository
from .unit_of_work import (
    ReleaseRepositories,
    ReleaseUnitOfWork,
    ReleaseUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ReleaseRepositories",
    "ReleaseRepository",
    "ReleaseUnitOfWork",
    "ReleaseUnitOfWorkFactory",
    "Repository",
    "RepositoryCollection",
    "TrackRepository",
    "UnitOfWork",
]
