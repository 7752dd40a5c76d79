"""Track completeness: does every track of a release have uploaded audio."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from releasedesk.domain.ports import ReleaseUnitOfWork


@dataclass(frozen=True, slots=True)
class Completeness:
    has_any_tracks: bool
    all_have_audio: bool

    @property
    def is_complete(self) -> bool:
        return self.has_any_tracks and self.all_have_audio

    @property
    def reason(self) -> str | None:
        if not self.has_any_tracks:
            return "Release has no tracks"
        if not self.all_have_audio:
            return "Not all tracks have uploaded audio"
        return None

    @classmethod
    def from_counts(cls, total: int, with_audio: int) -> Completeness:
        return cls(has_any_tracks=total > 0, all_have_audio=with_audio == total)


def check_completeness(uow: ReleaseUnitOfWork, release_id: UUID) -> Completeness:
    """Evaluate completeness against the persisted track set, never a cached one."""

    total, with_audio = uow.repositories.tracks.completeness_counts(release_id)
    return Completeness.from_counts(total, with_audio)
