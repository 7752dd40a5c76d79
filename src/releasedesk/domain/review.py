"""Admin review: PENDING_REVIEW -> PUBLISHED | REJECTED.

Unlike submission, review is not idempotent: approving something that was already
reviewed (or is not yet in the queue) fails instead of silently succeeding.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from releasedesk.domain.access import require_role
from releasedesk.domain.errors import InvalidStateError, NotFoundError
from releasedesk.domain.model import ReleaseStatus, UserRole

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from releasedesk.domain.model import Actor, AssetRef, Release
    from releasedesk.domain.ports import ReleaseUnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReviewResult:
    release_id: UUID
    status: ReleaseStatus
    ok: bool = True


def approve_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    release_id: UUID,
    actor: Actor,
) -> ReviewResult:
    return _review(unit_of_work_factory, release_id, actor, ReleaseStatus.PUBLISHED)


def reject_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    release_id: UUID,
    actor: Actor,
) -> ReviewResult:
    return _review(unit_of_work_factory, release_id, actor, ReleaseStatus.REJECTED)


def _review(
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    release_id: UUID,
    actor: Actor,
    decision: ReleaseStatus,
) -> ReviewResult:
    require_role(actor, UserRole.ADMIN)

    with unit_of_work_factory() as uow:
        releases = uow.repositories.releases
        if not releases.exists(release_id):
            raise NotFoundError(entity_id=release_id)
        applied = releases.conditional_transition(
            release_id, ReleaseStatus.PENDING_REVIEW, decision
        )
        if not applied:
            current = releases.get(release_id)
            raise InvalidStateError(
                "Release is not pending review",
                status=current.status if current is not None else None,
            )
        uow.commit()

    log.info("Release %s reviewed by %s: %s", release_id, actor.user_id, decision)
    return ReviewResult(release_id=release_id, status=decision)


def list_pending_review(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    actor: Actor,
) -> Sequence[Release]:
    """Return the review queue, oldest submission first."""

    require_role(actor, UserRole.ADMIN)
    with unit_of_work_factory() as uow:
        return uow.repositories.releases.list_by_status(
            ReleaseStatus.PENDING_REVIEW, oldest_first=True
        )


def get_review_audio(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    track_id: UUID,
    actor: Actor,
) -> AssetRef:
    """Return the audio of a track under review so an admin can listen to it.

    Only tracks with audio whose release is PENDING_REVIEW are exposed.
    """

    require_role(actor, UserRole.ADMIN)
    with unit_of_work_factory() as uow:
        track = uow.repositories.tracks.get(track_id)
        if track is None or track.audio is None:
            raise NotFoundError("Track audio not found", entity_id=track_id)
        release = uow.repositories.releases.get(track.release_id)
        if release is None or release.status != ReleaseStatus.PENDING_REVIEW:
            raise NotFoundError("Track audio not found", entity_id=track_id)
        return track.audio
