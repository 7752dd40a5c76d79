"""Public domain model surface."""

from __future__ import annotations

from releasedesk.domain.model.actor import Actor
from releasedesk.domain.model.catalog import Release, Track
from releasedesk.domain.model.entity import Entity, new_id, utcnow
from releasedesk.domain.model.enums import AssetKind, ReleaseStatus, UserRole
from releasedesk.domain.model.primitives import AssetRef, normalize_isrc

__all__ = [
    "Actor",
    "AssetKind",
    "AssetRef",
    "Entity",
    "Release",
    "ReleaseStatus",
    "Track",
    "UserRole",
    "new_id",
    "normalize_isrc",
    "utcnow",
]
