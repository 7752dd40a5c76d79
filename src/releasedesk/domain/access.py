"""Authorization-aware lookups shared by every release operation.

Non-owners get the same ``NotFoundError`` as callers asking for a release that
does not exist; admins may read any release.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from releasedesk.domain.errors import NotFoundError, PermissionDeniedError

if TYPE_CHECKING:
    from uuid import UUID

    from releasedesk.domain.model import Actor, Release, Track, UserRole
    from releasedesk.domain.ports import ReleaseUnitOfWork


def require_role(actor: Actor, role: UserRole) -> None:
    if actor.role != role:
        raise PermissionDeniedError(f"Only {role} may perform this operation")


def find_release_for(uow: ReleaseUnitOfWork, release_id: UUID, actor: Actor) -> Release:
    """Return the release if ``actor`` may see it, else raise ``NotFoundError``."""

    release = uow.repositories.releases.get(release_id)
    if release is None:
        raise NotFoundError(entity_id=release_id)
    if not actor.is_admin and not release.is_owned_by(actor.user_id):
        raise NotFoundError(entity_id=release_id)
    return release


def find_track_for(
    uow: ReleaseUnitOfWork,
    release_id: UUID,
    track_id: UUID,
    actor: Actor,
) -> tuple[Release, Track]:
    """Return a visible release together with one of its tracks."""

    release = find_release_for(uow, release_id, actor)
    track = uow.repositories.tracks.get(track_id)
    if track is None or track.release_id != release.id:
        raise NotFoundError("Track not found", entity_id=track_id)
    return release, track
