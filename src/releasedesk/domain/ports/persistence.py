"""Ports for persisting releases and tracks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from releasedesk.domain.model import Release, Track

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from releasedesk.domain.model import AssetRef, ReleaseStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ReleaseRepository(Repository[Release], Protocol):
    """Persistence contract for releases.

    Every status or draft change is a single conditional statement; the boolean
    result reports whether a row matched.
    """

    def get(self, release_id: UUID) -> Release | None: ...

    def exists(self, release_id: UUID) -> bool: ...

    def conditional_transition(
        self,
        release_id: UUID,
        expected_status: ReleaseStatus | None,
        new_status: ReleaseStatus,
    ) -> bool: ...

    def list_by_status(
        self,
        status: ReleaseStatus,
        *,
        limit: int | None = None,
        oldest_first: bool = True,
    ) -> Sequence[Release]: ...

    def list_for_artist(self, artist_id: UUID) -> Sequence[Release]: ...

    def list_all(self, *, status: ReleaseStatus | None = None) -> Sequence[Release]: ...

    def update_draft(
        self, release_id: UUID, artist_id: UUID, *, title: str, genre: str
    ) -> bool: ...

    def set_cover_art(self, release_id: UUID, artist_id: UUID, asset: AssetRef) -> bool: ...

    def lock_draft(self, release_id: UUID) -> bool: ...


@runtime_checkable
class TrackRepository(Repository[Track], Protocol):
    """Persistence contract for tracks."""

    def get(self, track_id: UUID) -> Track | None: ...

    def list_for_release(self, release_id: UUID) -> Sequence[Track]: ...

    def remove(self, track: Track) -> None: ...

    def isrc_taken(self, isrc: str, *, exclude_track_id: UUID | None = None) -> bool: ...

    def completeness_counts(self, release_id: UUID) -> tuple[int, int]: ...

    def attach_audio_if_draft(self, track_id: UUID, release_id: UUID, asset: AssetRef) -> bool: ...
