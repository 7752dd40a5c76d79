"""Draft editing: everything an artist does before submitting a release.

All edits require the release to still be a DRAFT. Release-level edits are single
conditional statements in the store; track edits first take the release row lock
while it is still a DRAFT. Either way an edit racing a submission lands before the
freeze or is rejected with ``InvalidStateError``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from releasedesk.domain.access import find_release_for, find_track_for, require_role
from releasedesk.domain.assets import asset_for_release
from releasedesk.domain.errors import InvalidStateError, StoreConflictError
from releasedesk.domain.model import Release, Track, UserRole, normalize_isrc

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from releasedesk.domain.model import Actor, ReleaseStatus
    from releasedesk.domain.ports import ReleaseUnitOfWork, ReleaseUnitOfWorkFactory

log = getLogger(__name__)

NOT_EDITABLE = "Release is not editable"
ISRC_TAKEN = "ISRC already exists"


def create_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    title: str,
    genre: str,
) -> Release:
    require_role(actor, UserRole.ARTIST)
    release = Release(artist_id=actor.user_id, title=title.strip(), genre=genre.strip())
    with unit_of_work_factory() as uow:
        uow.repositories.releases.add(release)
        uow.commit()
    log.info("Created draft release %s for artist %s", release.id, actor.user_id)
    return release


def get_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
) -> Release:
    with unit_of_work_factory() as uow:
        return find_release_for(uow, release_id, actor)


def list_releases(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    status: ReleaseStatus | None = None,
) -> Sequence[Release]:
    """Artists see their own releases; admins see all, optionally filtered by status."""

    with unit_of_work_factory() as uow:
        releases = uow.repositories.releases
        if actor.is_admin:
            return releases.list_all(status=status)
        owned = releases.list_for_artist(actor.user_id)
        if status is None:
            return owned
        return [release for release in owned if release.status == status]


def update_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    title: str,
    genre: str,
) -> None:
    require_role(actor, UserRole.ARTIST)
    with unit_of_work_factory() as uow:
        release = find_release_for(uow, release_id, actor)
        applied = uow.repositories.releases.update_draft(
            release_id, actor.user_id, title=title.strip(), genre=genre.strip()
        )
        if not applied:
            raise InvalidStateError(NOT_EDITABLE, status=release.status)
        uow.commit()


def set_cover_art(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    object_key: str,
    public_url: str | None = None,
    public_base_url: str | None = None,
) -> None:
    """Record a finished cover-art upload on a draft release."""

    require_role(actor, UserRole.ARTIST)
    asset = asset_for_release(
        release_id, object_key, public_url=public_url, public_base_url=public_base_url
    )
    with unit_of_work_factory() as uow:
        release = find_release_for(uow, release_id, actor)
        if not uow.repositories.releases.set_cover_art(release_id, actor.user_id, asset):
            raise InvalidStateError(NOT_EDITABLE, status=release.status)
        uow.commit()


def list_tracks(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
) -> Sequence[Track]:
    with unit_of_work_factory() as uow:
        find_release_for(uow, release_id, actor)
        return uow.repositories.tracks.list_for_release(release_id)


def add_track(  # noqa: PLR0913
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    title: str,
    isrc: str,
    duration_seconds: int | None = None,
    audio_object_key: str | None = None,
    public_base_url: str | None = None,
) -> Track:
    require_role(actor, UserRole.ARTIST)
    normalized_isrc = normalize_isrc(isrc)
    track = Track(
        release_id=release_id,
        title=title.strip(),
        isrc=normalized_isrc,
        duration_seconds=_validated_duration(duration_seconds),
    )
    if audio_object_key is not None:
        track.attach_audio(
            asset_for_release(release_id, audio_object_key, public_base_url=public_base_url)
        )

    with unit_of_work_factory() as uow:
        release = find_release_for(uow, release_id, actor)
        _lock_draft(uow, release)
        if uow.repositories.tracks.isrc_taken(normalized_isrc):
            raise InvalidStateError(ISRC_TAKEN, status=release.status)
        uow.repositories.tracks.add(track)
        _commit_track_changes(uow)

    log.info("Added track %s to release %s", track.id, release_id)
    return track


def update_track(  # noqa: PLR0913
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    track_id: UUID,
    title: str,
    isrc: str | None = None,
    duration_seconds: int | None = None,
    audio_object_key: str | None = None,
    public_base_url: str | None = None,
) -> Track:
    """Edit a track; omitted optional fields keep their current values."""

    require_role(actor, UserRole.ARTIST)
    normalized_isrc = normalize_isrc(isrc) if isrc is not None else None
    audio = (
        asset_for_release(release_id, audio_object_key, public_base_url=public_base_url)
        if audio_object_key is not None
        else None
    )

    with unit_of_work_factory() as uow:
        release, track = find_track_for(uow, release_id, track_id, actor)
        _lock_draft(uow, release)
        if normalized_isrc is not None and normalized_isrc != track.isrc:
            if uow.repositories.tracks.isrc_taken(normalized_isrc, exclude_track_id=track_id):
                raise InvalidStateError(ISRC_TAKEN, status=release.status)
            track.isrc = normalized_isrc
        track.title = title.strip()
        if duration_seconds is not None:
            track.duration_seconds = _validated_duration(duration_seconds)
        if audio is not None:
            track.attach_audio(audio)
        _commit_track_changes(uow)
    return track


def attach_track_audio(  # noqa: PLR0913
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    track_id: UUID,
    object_key: str,
    public_url: str | None = None,
    public_base_url: str | None = None,
) -> None:
    """Record a finished audio upload for a track of a draft release.

    This is what makes a track count as complete.
    """

    require_role(actor, UserRole.ARTIST)
    asset = asset_for_release(
        release_id, object_key, public_url=public_url, public_base_url=public_base_url
    )
    with unit_of_work_factory() as uow:
        release, _track = find_track_for(uow, release_id, track_id, actor)
        _lock_draft(uow, release)
        if not uow.repositories.tracks.attach_audio_if_draft(track_id, release_id, asset):
            raise InvalidStateError(NOT_EDITABLE, status=release.status)
        uow.commit()
    log.debug("Attached audio %s to track %s", object_key, track_id)


def remove_track(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
    release_id: UUID,
    track_id: UUID,
) -> None:
    require_role(actor, UserRole.ARTIST)
    with unit_of_work_factory() as uow:
        release, track = find_track_for(uow, release_id, track_id, actor)
        _lock_draft(uow, release)
        uow.repositories.tracks.remove(track)
        uow.commit()
    log.info("Removed track %s from release %s", track_id, release_id)


def _lock_draft(uow: ReleaseUnitOfWork, release: Release) -> None:
    if not release.is_draft:
        raise InvalidStateError(NOT_EDITABLE, status=release.status)
    releases = uow.repositories.releases
    if not releases.lock_draft(release.id):
        current = releases.get(release.id)
        raise InvalidStateError(NOT_EDITABLE, status=current.status if current else None)


def _validated_duration(duration_seconds: int | None) -> int | None:
    if duration_seconds is not None and duration_seconds < 1:
        raise ValueError("duration must be a positive number of seconds")
    return duration_seconds


def _commit_track_changes(uow: ReleaseUnitOfWork) -> None:
    try:
        uow.commit()
    except StoreConflictError as exc:
        # Unique ISRC constraint lost a race with a concurrent insert.
        raise InvalidStateError(ISRC_TAKEN) from exc
