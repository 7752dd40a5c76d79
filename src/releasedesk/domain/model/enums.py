"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ReleaseStatus(StrEnum):
    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    PENDING_REVIEW = "PENDING_REVIEW"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class UserRole(StrEnum):
    ARTIST = "ARTIST"
    ADMIN = "ADMIN"


class AssetKind(StrEnum):
    """Kinds of uploaded objects a release can reference."""

    COVER_ART = "cover"
    TRACK_AUDIO = "audio"
