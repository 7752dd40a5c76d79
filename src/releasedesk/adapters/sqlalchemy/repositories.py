"""Repository implementations backed by SQLAlchemy sessions.

Status and draft changes are issued as single ``UPDATE ... WHERE`` statements whose
row count tells the caller whether the precondition held at the database. Reads
always repopulate from the database so a conditional update that lost a race is
followed by the winner's state, not a stale identity-map copy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func, select

from releasedesk.adapters.sqlalchemy.mappings import release_table, track_table
from releasedesk.domain.lifecycle import ensure_transition
from releasedesk.domain.model import Release, ReleaseStatus, Track

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import Update
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from releasedesk.domain.model import AssetRef

log = logging.getLogger(__name__)


def _rowcount(session: Session, stmt: Update) -> int:
    result = cast("CursorResult[Any]", session.execute(stmt))
    return result.rowcount


class SqlAlchemyReleaseRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Release) -> None:
        self.session.add(entity)

    def get(self, release_id: UUID) -> Release | None:
        return self.session.get(Release, release_id, populate_existing=True)

    def exists(self, release_id: UUID) -> bool:
        stmt = select(release_table.c.id).where(release_table.c.id == release_id)
        return self.session.execute(stmt).first() is not None

    def conditional_transition(
        self,
        release_id: UUID,
        expected_status: ReleaseStatus | None,
        new_status: ReleaseStatus,
    ) -> bool:
        """Set ``new_status`` iff the stored status equals ``expected_status``.

        ``expected_status=None`` updates unconditionally; it bypasses the lifecycle
        graph and is reserved for operator recovery.
        """

        stmt = (
            release_table.update()
            .where(release_table.c.id == release_id)
            .values(status=new_status)
        )
        if expected_status is None:
            log.warning("Unconditional status change of release %s to %s", release_id, new_status)
        else:
            ensure_transition(expected_status, new_status)
            stmt = stmt.where(release_table.c.status == expected_status)
        applied = _rowcount(self.session, stmt) > 0
        log.debug(
            "Transition %s: %s -> %s applied=%s", release_id, expected_status, new_status, applied
        )
        return applied

    def list_by_status(
        self,
        status: ReleaseStatus,
        *,
        limit: int | None = None,
        oldest_first: bool = True,
    ) -> Sequence[Release]:
        created_at = release_table.c.created_at
        stmt = (
            select(Release)
            .where(release_table.c.status == status)
            .order_by(created_at.asc() if oldest_first else created_at.desc())
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def list_for_artist(self, artist_id: UUID) -> Sequence[Release]:
        stmt = (
            select(Release)
            .where(release_table.c.artist_id == artist_id)
            .order_by(release_table.c.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.scalars(stmt))

    def list_all(self, *, status: ReleaseStatus | None = None) -> Sequence[Release]:
        stmt = (
            select(Release)
            .order_by(release_table.c.created_at.desc())
            .execution_options(populate_existing=True)
        )
        if status is not None:
            stmt = stmt.where(release_table.c.status == status)
        return list(self.session.scalars(stmt))

    def update_draft(self, release_id: UUID, artist_id: UUID, *, title: str, genre: str) -> bool:
        stmt = self._draft_update(release_id, artist_id).values(title=title, genre=genre)
        return _rowcount(self.session, stmt) > 0

    def set_cover_art(self, release_id: UUID, artist_id: UUID, asset: AssetRef) -> bool:
        stmt = self._draft_update(release_id, artist_id).values(
            cover_art_object_key=asset.object_key,
            cover_art_public_url=asset.public_url,
        )
        return _rowcount(self.session, stmt) > 0

    def lock_draft(self, release_id: UUID) -> bool:
        """Write-lock the release row for the rest of the transaction iff it is a DRAFT.

        The no-op update holds the row until commit; a concurrent status change waits
        for it, and a lock taken after that change commits matches no row.
        """

        stmt = (
            release_table.update()
            .where(release_table.c.id == release_id)
            .where(release_table.c.status == ReleaseStatus.DRAFT)
            .values(status=release_table.c.status)
        )
        return _rowcount(self.session, stmt) > 0

    @staticmethod
    def _draft_update(release_id: UUID, artist_id: UUID) -> Update:
        return (
            release_table.update()
            .where(release_table.c.id == release_id)
            .where(release_table.c.artist_id == artist_id)
            .where(release_table.c.status == ReleaseStatus.DRAFT)
        )


class SqlAlchemyTrackRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Track) -> None:
        self.session.add(entity)

    def get(self, track_id: UUID) -> Track | None:
        return self.session.get(Track, track_id, populate_existing=True)

    def list_for_release(self, release_id: UUID) -> Sequence[Track]:
        stmt = (
            select(Track)
            .where(track_table.c.release_id == release_id)
            .order_by(track_table.c.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.scalars(stmt))

    def remove(self, track: Track) -> None:
        self.session.delete(track)

    def isrc_taken(self, isrc: str, *, exclude_track_id: UUID | None = None) -> bool:
        stmt = select(track_table.c.id).where(track_table.c.isrc == isrc)
        if exclude_track_id is not None:
            stmt = stmt.where(track_table.c.id != exclude_track_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def completeness_counts(self, release_id: UUID) -> tuple[int, int]:
        """Return ``(total tracks, tracks with audio)`` in one aggregate query."""

        stmt = select(
            func.count(track_table.c.id),
            func.count(track_table.c.audio_object_key),
        ).where(track_table.c.release_id == release_id)
        total, with_audio = self.session.execute(stmt).one()
        return int(total), int(with_audio)

    def attach_audio_if_draft(self, track_id: UUID, release_id: UUID, asset: AssetRef) -> bool:
        draft_release = (
            select(release_table.c.id)
            .where(release_table.c.id == release_id)
            .where(release_table.c.status == ReleaseStatus.DRAFT)
            .scalar_subquery()
        )
        stmt = (
            track_table.update()
            .where(track_table.c.id == track_id)
            .where(track_table.c.release_id == draft_release)
            .values(audio_object_key=asset.object_key, audio_public_url=asset.public_url)
        )
        return _rowcount(self.session, stmt) > 0


if TYPE_CHECKING:
    from releasedesk.domain.ports.persistence import ReleaseRepository, TrackRepository

    _session_stub = cast("Session", object())
    _release_repo: ReleaseRepository = SqlAlchemyReleaseRepository(_session_stub)
    _track_repo: TrackRepository = SqlAlchemyTrackRepository(_session_stub)
