from __future__ import annotations

from typing import TYPE_CHECKING

from releasedesk.domain.completeness import Completeness, check_completeness
from tests.helpers.releases import seed_release, unknown_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from releasedesk.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


def test_completeness_from_counts() -> None:
    assert Completeness.from_counts(0, 0) == Completeness(
        has_any_tracks=False, all_have_audio=True
    )
    assert Completeness.from_counts(3, 2) == Completeness(has_any_tracks=True, all_have_audio=False)
    assert Completeness.from_counts(2, 2).is_complete


def test_reason_explains_what_is_missing() -> None:
    assert Completeness.from_counts(0, 0).reason == "Release has no tracks"
    assert Completeness.from_counts(2, 1).reason == "Not all tracks have uploaded audio"
    assert Completeness.from_counts(1, 1).reason is None


def test_release_without_tracks_is_incomplete(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, tracks=())

    with sqlite_unit_of_work() as uow:
        result = check_completeness(uow, release.id)

    assert not result.has_any_tracks
    assert not result.is_complete


def test_one_missing_audio_makes_release_incomplete(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, tracks=(True, False, True))

    with sqlite_unit_of_work() as uow:
        result = check_completeness(uow, release.id)

    assert result.has_any_tracks
    assert not result.all_have_audio


def test_all_tracks_with_audio_is_complete(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, tracks=(True, True))

    with sqlite_unit_of_work() as uow:
        assert check_completeness(uow, release.id).is_complete


def test_unknown_release_has_no_tracks(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        assert not check_completeness(uow, unknown_id()).has_any_tracks
