"""Pydantic payloads exchanged with the route layer."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Self
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator

from releasedesk.domain.model import ReleaseStatus, normalize_isrc
from releasedesk.domain.submission import SubmissionState  # noqa: TC001

if TYPE_CHECKING:
    from releasedesk.domain.model import Release, Track
    from releasedesk.domain.review import ReviewResult
    from releasedesk.domain.submission import SubmissionResult


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ReleaseDraftPayload(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    genre: str = Field(min_length=1, max_length=80)


class TrackPayload(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    # Length is enforced after hyphens are stripped.
    isrc: str = Field(min_length=1)
    duration: int | None = Field(default=None, ge=1)
    audio_object_key: str | None = Field(default=None, min_length=1, alias="audioObjectKey")

    @field_validator("isrc")
    @classmethod
    def check_isrc(cls, value: str) -> str:
        return normalize_isrc(value)


class TrackUpdatePayload(TrackPayload):
    isrc: str | None = Field(default=None, min_length=1)

    @field_validator("isrc")
    @classmethod
    def check_isrc(cls, value: str | None) -> str | None:
        return normalize_isrc(value) if value is not None else None


class FinalizeUploadPayload(ApiModel):
    release_id: UUID = Field(alias="releaseId")
    track_id: UUID | None = Field(default=None, alias="trackId")
    object_key: str = Field(min_length=1, alias="objectKey")
    public_url: str | None = Field(default=None, alias="publicUrl")


class ReleaseView(ApiModel):
    id: UUID
    artist_id: UUID
    title: str
    genre: str
    status: ReleaseStatus
    cover_art_object_key: str | None = None
    cover_art_public_url: str | None = None
    created_at: datetime

    @classmethod
    def from_release(cls, release: Release) -> Self:
        return cls(
            id=release.id,
            artist_id=release.artist_id,
            title=release.title,
            genre=release.genre,
            status=release.status,
            cover_art_object_key=release.cover_art_object_key,
            cover_art_public_url=release.cover_art_public_url,
            created_at=release.created_at,
        )


class TrackView(ApiModel):
    id: UUID
    release_id: UUID
    title: str
    isrc: str
    duration: int | None = None
    audio_object_key: str | None = None
    audio_public_url: str | None = None
    created_at: datetime

    @classmethod
    def from_track(cls, track: Track) -> Self:
        return cls(
            id=track.id,
            release_id=track.release_id,
            title=track.title,
            isrc=track.isrc,
            duration=track.duration_seconds,
            audio_object_key=track.audio_object_key,
            audio_public_url=track.audio_public_url,
            created_at=track.created_at,
        )


class SubmitResponse(ApiModel):
    ok: bool = True
    state: SubmissionState

    @classmethod
    def from_result(cls, result: SubmissionResult) -> Self:
        return cls(ok=result.ok, state=result.state)


class ReviewResponse(ApiModel):
    ok: bool = True
    status: ReleaseStatus

    @classmethod
    def from_result(cls, result: ReviewResult) -> Self:
        return cls(ok=result.ok, status=result.status)


class ErrorResponse(ApiModel):
    message: str
