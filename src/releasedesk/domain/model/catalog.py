"""Release aggregate and its tracks.

A release is owned by exactly one artist. Its status only ever changes through the
store's conditional transition; the entity itself never mutates ``status``.
Tracks reference their release by id and are editable only while it is a draft.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from releasedesk.domain.model.entity import Entity
from releasedesk.domain.model.enums import ReleaseStatus
from releasedesk.domain.model.primitives import AssetRef

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Release(Entity):
    artist_id: UUID
    title: str
    genre: str
    status: ReleaseStatus = ReleaseStatus.DRAFT

    cover_art_object_key: str | None = None
    cover_art_public_url: str | None = None

    @property
    def cover_art(self) -> AssetRef | None:
        return AssetRef.from_columns(self.cover_art_object_key, self.cover_art_public_url)

    @property
    def is_draft(self) -> bool:
        return self.status == ReleaseStatus.DRAFT

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.artist_id == user_id


@dataclass(eq=False, kw_only=True)
class Track(Entity):
    release_id: UUID
    title: str
    isrc: str
    duration_seconds: int | None = None

    audio_object_key: str | None = None
    audio_public_url: str | None = None

    @property
    def audio(self) -> AssetRef | None:
        return AssetRef.from_columns(self.audio_object_key, self.audio_public_url)

    @property
    def has_audio(self) -> bool:
        return self.audio_object_key is not None

    def attach_audio(self, asset: AssetRef) -> None:
        self.audio_object_key = asset.object_key
        self.audio_public_url = asset.public_url
