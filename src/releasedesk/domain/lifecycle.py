"""The release lifecycle graph.

DRAFT -> PROCESSING -> PENDING_REVIEW -> {PUBLISHED | REJECTED}
"""

from __future__ import annotations

from typing import Final

from releasedesk.domain.errors import IllegalTransitionError
from releasedesk.domain.model import ReleaseStatus

TRANSITIONS: Final[dict[ReleaseStatus, frozenset[ReleaseStatus]]] = {
    ReleaseStatus.DRAFT: frozenset({ReleaseStatus.PROCESSING}),
    ReleaseStatus.PROCESSING: frozenset({ReleaseStatus.PENDING_REVIEW}),
    ReleaseStatus.PENDING_REVIEW: frozenset({ReleaseStatus.PUBLISHED, ReleaseStatus.REJECTED}),
    ReleaseStatus.PUBLISHED: frozenset(),
    ReleaseStatus.REJECTED: frozenset(),
}

TERMINAL_STATUSES: Final[frozenset[ReleaseStatus]] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)

# Statuses a release reaches once its artist has submitted it.
SUBMITTED_STATUSES: Final[frozenset[ReleaseStatus]] = frozenset(
    {ReleaseStatus.PENDING_REVIEW, ReleaseStatus.PUBLISHED, ReleaseStatus.REJECTED}
)


def can_transition(current: ReleaseStatus, target: ReleaseStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: ReleaseStatus, target: ReleaseStatus) -> None:
    """Raise ``IllegalTransitionError`` unless ``current -> target`` is a lifecycle edge."""

    if not can_transition(current, target):
        raise IllegalTransitionError(current, target)


def is_terminal(status: ReleaseStatus) -> bool:
    return status in TERMINAL_STATUSES
