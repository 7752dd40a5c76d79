"""Artist-initiated submission: DRAFT -> PROCESSING.

Repeated submit calls are harmless. A release that is already PROCESSING reports
``already_processing`` (double clicks, or a click racing the sweep) and one that has
moved past PROCESSING reports ``already_submitted``; the caller uses the difference
to decide whether to keep polling.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from releasedesk.domain.access import find_release_for, require_role
from releasedesk.domain.completeness import check_completeness
from releasedesk.domain.errors import InvalidStateError, NotFoundError
from releasedesk.domain.lifecycle import SUBMITTED_STATUSES
from releasedesk.domain.model import ReleaseStatus, UserRole

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from releasedesk.domain.model import Actor
    from releasedesk.domain.ports import ReleaseUnitOfWorkFactory

log = getLogger(__name__)


class SubmissionState(StrEnum):
    PROCESSING_STARTED = "processing_started"
    ALREADY_PROCESSING = "already_processing"
    ALREADY_SUBMITTED = "already_submitted"


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    release_id: UUID
    state: SubmissionState
    ok: bool = True

    @property
    def started(self) -> bool:
        return self.state is SubmissionState.PROCESSING_STARTED


def _existing_outcome(status: ReleaseStatus) -> SubmissionState | None:
    """Map a non-draft status to its idempotent outcome; ``None`` for DRAFT."""

    if status in SUBMITTED_STATUSES:
        return SubmissionState.ALREADY_SUBMITTED
    if status == ReleaseStatus.PROCESSING:
        return SubmissionState.ALREADY_PROCESSING
    if status == ReleaseStatus.DRAFT:
        return None
    raise InvalidStateError("Release is not submittable", status=status)


def submit_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    release_id: UUID,
    actor: Actor,
    on_processing_started: Callable[[UUID], None] | None = None,
) -> SubmissionResult:
    """Submit a draft for processing.

    Raises ``NotFoundError`` when the release is absent or not owned by ``actor``
    and ``InvalidStateError`` when a draft has no tracks or a track lacks audio.
    ``on_processing_started`` runs after the transition is committed; the periodic
    sweep picks the release up regardless.
    """

    require_role(actor, UserRole.ARTIST)

    with unit_of_work_factory() as uow:
        releases = uow.repositories.releases
        release = find_release_for(uow, release_id, actor)

        state = _existing_outcome(release.status)
        if state is not None:
            log.debug("Release %s already %s", release_id, release.status)
            return SubmissionResult(release_id=release_id, state=state)

        completeness = check_completeness(uow, release_id)
        if not completeness.is_complete:
            raise InvalidStateError(
                completeness.reason or "Release is not submittable",
                status=release.status,
            )

        applied = releases.conditional_transition(
            release_id, ReleaseStatus.DRAFT, ReleaseStatus.PROCESSING
        )
        if applied:
            # The transition holds the release row, so track edits are settled now.
            completeness = check_completeness(uow, release_id)
            if not completeness.is_complete:
                raise InvalidStateError(
                    completeness.reason or "Release is not submittable",
                    status=ReleaseStatus.DRAFT,
                )
        uow.commit()

        if not applied:
            # Another submission won the race; report whatever it left behind.
            current = releases.get(release_id)
            if current is None:
                raise NotFoundError(entity_id=release_id)
            state = _existing_outcome(current.status)
            if state is None:
                raise InvalidStateError("Release is not submittable", status=current.status)
            log.debug("Lost submission race for release %s (%s)", release_id, current.status)
            return SubmissionResult(release_id=release_id, state=state)

    log.info("Release %s submitted; processing started", release_id)
    if on_processing_started is not None:
        on_processing_started(release_id)
    return SubmissionResult(release_id=release_id, state=SubmissionState.PROCESSING_STARTED)
