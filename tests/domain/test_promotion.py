from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

import pytest

from releasedesk.domain import promotion
from releasedesk.domain.completeness import check_completeness
from releasedesk.domain.errors import InvalidStateError
from releasedesk.domain.model import ReleaseStatus
from releasedesk.domain.promotion import (
    PromotionOutcome,
    PromotionSweeper,
    SweepReport,
    promote_ready_releases,
    promote_release,
)
from releasedesk.domain.review import approve_release
from releasedesk.domain.submission import SubmissionState, submit_release
from tests.helpers.releases import (
    ADMIN,
    ARTIST,
    current_status,
    seed_release,
    seed_releases_in_order,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from releasedesk.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from releasedesk.domain.completeness import Completeness
    from releasedesk.domain.ports import ReleaseUnitOfWork


def test_complete_processing_release_is_promoted(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, status=ReleaseStatus.PROCESSING)

    report = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)

    assert report.scanned == 1
    assert report.promoted == 1
    assert report.promoted_ids == [release.id]
    assert current_status(sqlite_unit_of_work, release.id) is ReleaseStatus.PENDING_REVIEW


def test_incomplete_processing_release_stays_processing(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(
        sqlite_unit_of_work, status=ReleaseStatus.PROCESSING, tracks=(True, False)
    )

    for _ in range(3):
        report = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)
        assert report.incomplete == 1
        assert report.promoted == 0

    assert current_status(sqlite_unit_of_work, release.id) is ReleaseStatus.PROCESSING


def test_release_is_promoted_exactly_once(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, status=ReleaseStatus.PROCESSING)

    first = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)
    second = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)

    assert first.promoted_ids == [release.id]
    assert second == SweepReport()


def test_sweep_ignores_releases_outside_processing(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    draft = seed_release(sqlite_unit_of_work, status=ReleaseStatus.DRAFT)
    published = seed_release(sqlite_unit_of_work, status=ReleaseStatus.PUBLISHED)

    report = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)

    assert report.scanned == 0
    assert current_status(sqlite_unit_of_work, draft.id) is ReleaseStatus.DRAFT
    assert current_status(sqlite_unit_of_work, published.id) is ReleaseStatus.PUBLISHED


def test_sweep_takes_oldest_releases_first_up_to_batch_size(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    releases = seed_releases_in_order(sqlite_unit_of_work, 5, status=ReleaseStatus.PROCESSING)

    first = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work, batch_size=2)
    second = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work, batch_size=2)
    third = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work, batch_size=2)

    assert first.promoted_ids == [releases[0].id, releases[1].id]
    assert second.promoted_ids == [releases[2].id, releases[3].id]
    assert third.promoted_ids == [releases[4].id]


def test_promote_release_skips_when_status_already_moved(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, status=ReleaseStatus.PENDING_REVIEW)

    outcome = promote_release(unit_of_work_factory=sqlite_unit_of_work, release_id=release.id)

    assert outcome is PromotionOutcome.SKIPPED
    assert current_status(sqlite_unit_of_work, release.id) is ReleaseStatus.PENDING_REVIEW


def test_failure_on_one_release_does_not_stop_the_pass(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken, healthy = seed_releases_in_order(
        sqlite_unit_of_work, 2, status=ReleaseStatus.PROCESSING
    )

    def flaky_completeness(uow: ReleaseUnitOfWork, release_id: UUID) -> Completeness:
        if release_id == broken.id:
            raise RuntimeError("store hiccup")
        return check_completeness(uow, release_id)

    monkeypatch.setattr(promotion, "check_completeness", flaky_completeness)

    report = promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work)

    assert report.failed == 1
    assert report.promoted_ids == [healthy.id]
    assert current_status(sqlite_unit_of_work, broken.id) is ReleaseStatus.PROCESSING
    assert current_status(sqlite_unit_of_work, healthy.id) is ReleaseStatus.PENDING_REVIEW


def test_sweep_rejects_non_positive_batch_size(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with pytest.raises(ValueError, match="batch_size"):
        promote_ready_releases(unit_of_work_factory=sqlite_unit_of_work, batch_size=0)


def test_sweeper_validates_its_settings(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with pytest.raises(ValueError, match="interval_seconds"):
        PromotionSweeper(unit_of_work_factory=sqlite_unit_of_work, interval_seconds=0)
    with pytest.raises(ValueError, match="batch_size"):
        PromotionSweeper(unit_of_work_factory=sqlite_unit_of_work, batch_size=0)


def test_sweeper_run_once_records_last_report(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(sqlite_unit_of_work, status=ReleaseStatus.PROCESSING)
    sweeper = PromotionSweeper(unit_of_work_factory=sqlite_unit_of_work)

    report = sweeper.run_once()

    assert sweeper.passes == 1
    assert sweeper.last_report is report
    assert report.promoted_ids == [release.id]
    assert not sweeper.running


def test_background_sweeper_promotes_after_wake(
    file_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(file_unit_of_work, tracks=(True, True))
    sweeper = PromotionSweeper(unit_of_work_factory=file_unit_of_work, interval_seconds=60)

    with sweeper:
        assert sweeper.running
        with pytest.raises(RuntimeError):
            sweeper.start()
        submit_release(
            unit_of_work_factory=file_unit_of_work,
            release_id=release.id,
            actor=ARTIST,
            on_processing_started=sweeper.wake,
        )
        deadline = time.monotonic() + 10
        while time.monotonic() < deadline:
            if current_status(file_unit_of_work, release.id) is ReleaseStatus.PENDING_REVIEW:
                break
            time.sleep(0.05)

    assert not sweeper.running
    assert current_status(file_unit_of_work, release.id) is ReleaseStatus.PENDING_REVIEW
    assert sweeper.passes >= 1


def test_background_sweeper_runs_on_interval(
    file_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(file_unit_of_work, status=ReleaseStatus.PROCESSING)
    sweeper = PromotionSweeper(unit_of_work_factory=file_unit_of_work, interval_seconds=0.05)

    sweeper.start()
    try:
        deadline = time.monotonic() + 10
        while time.monotonic() < deadline and sweeper.passes < 2:
            time.sleep(0.05)
    finally:
        sweeper.stop(timeout=5)

    assert sweeper.passes >= 2
    assert current_status(file_unit_of_work, release.id) is ReleaseStatus.PENDING_REVIEW


def test_concurrent_sweeps_and_review_promote_once(
    file_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    release = seed_release(file_unit_of_work, status=ReleaseStatus.PROCESSING, tracks=(True, True))
    barrier = threading.Barrier(5)
    reports: list[SweepReport] = []
    outcomes: dict[str, object] = {}
    lock = threading.Lock()

    def sweep() -> None:
        barrier.wait()
        report = promote_ready_releases(unit_of_work_factory=file_unit_of_work)
        with lock:
            reports.append(report)

    def approve() -> None:
        barrier.wait()
        try:
            result = approve_release(
                unit_of_work_factory=file_unit_of_work, release_id=release.id, actor=ADMIN
            )
        except InvalidStateError as exc:
            outcomes["approve"] = exc
        else:
            outcomes["approve"] = result.status

    def resubmit() -> None:
        barrier.wait()
        outcomes["submit"] = submit_release(
            unit_of_work_factory=file_unit_of_work, release_id=release.id, actor=ARTIST
        ).state

    threads = [threading.Thread(target=sweep) for _ in range(3)]
    threads += [threading.Thread(target=approve), threading.Thread(target=resubmit)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert len(reports) == 3
    assert sum(report.promoted for report in reports) == 1
    assert sum(report.failed for report in reports) == 0
    assert outcomes["submit"] in {
        SubmissionState.ALREADY_PROCESSING,
        SubmissionState.ALREADY_SUBMITTED,
    }
    final = current_status(file_unit_of_work, release.id)
    if outcomes["approve"] is ReleaseStatus.PUBLISHED:
        assert final is ReleaseStatus.PUBLISHED
    else:
        assert isinstance(outcomes["approve"], InvalidStateError)
        assert final is ReleaseStatus.PENDING_REVIEW


def test_sweeper_cannot_restart_while_a_pass_outlives_stop(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    entered = threading.Event()
    release_pass = threading.Event()

    def slow_pass(**_kwargs: object) -> SweepReport:
        entered.set()
        release_pass.wait(10)
        return SweepReport()

    monkeypatch.setattr(promotion, "promote_ready_releases", slow_pass)
    sweeper = PromotionSweeper(unit_of_work_factory=sqlite_unit_of_work, interval_seconds=60)

    sweeper.start()
    sweeper.wake()
    assert entered.wait(5)

    sweeper.stop(timeout=0.05)
    assert sweeper.running
    with pytest.raises(RuntimeError):
        sweeper.start()

    release_pass.set()
    sweeper.stop(timeout=5)
    assert not sweeper.running
    assert sweeper.passes == 1
