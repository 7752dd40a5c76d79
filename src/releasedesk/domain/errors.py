"""Errors raised by release lifecycle operations.

``NotFoundError`` deliberately covers both "does not exist" and "exists but is not
yours" so that callers cannot probe for other artists' releases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from releasedesk.domain.model import ReleaseStatus


class ReleaseDeskError(Exception):
    """Base class for domain errors."""


class NotFoundError(ReleaseDeskError):
    """The release or track is absent, or the caller may not see it."""

    def __init__(
        self, message: str = "Release not found", *, entity_id: UUID | None = None
    ) -> None:
        super().__init__(message)
        self.entity_id = entity_id


class InvalidStateError(ReleaseDeskError):
    """A transition or edit precondition does not hold."""

    def __init__(self, message: str, *, status: ReleaseStatus | None = None) -> None:
        super().__init__(message)
        self.status = status


class PermissionDeniedError(ReleaseDeskError):
    """The caller's role may not perform the operation."""


class TransientStoreError(ReleaseDeskError):
    """The store could not complete an operation; the outcome is unknown and retryable."""


class StoreConflictError(ReleaseDeskError):
    """A write was rejected by a uniqueness constraint."""


class IllegalTransitionError(ValueError):
    """A status change that is not an edge of the release lifecycle graph."""

    def __init__(self, current: ReleaseStatus, target: ReleaseStatus) -> None:
        super().__init__(f"Illegal release transition {current} -> {target}")
        self.current = current
        self.target = target
