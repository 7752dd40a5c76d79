"""Promotion sweep: advance PROCESSING releases whose tracks are complete.

Each pass is a stateless scan over a bounded, oldest-first batch. The only side
effect per release is one conditional PROCESSING -> PENDING_REVIEW update, so a
pass can be interrupted at any point and simply resumed by the next one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from releasedesk.config.workflow import DEFAULT_SWEEP_BATCH_SIZE, DEFAULT_SWEEP_INTERVAL_SECONDS
from releasedesk.domain.completeness import check_completeness
from releasedesk.domain.model import ReleaseStatus

if TYPE_CHECKING:
    from types import TracebackType
    from uuid import UUID

    from releasedesk.domain.ports import ReleaseUnitOfWorkFactory

log = getLogger(__name__)


class PromotionOutcome(StrEnum):
    PROMOTED = "promoted"
    INCOMPLETE = "incomplete"
    SKIPPED = "skipped"


@dataclass(slots=True)
class SweepReport:
    """Counters for a single sweep pass."""

    scanned: int = 0
    promoted: int = 0
    incomplete: int = 0
    skipped: int = 0
    failed: int = 0
    promoted_ids: list[UUID] = field(default_factory=list["UUID"])

    def record(self, release_id: UUID, outcome: PromotionOutcome) -> None:
        match outcome:
            case PromotionOutcome.PROMOTED:
                self.promoted += 1
                self.promoted_ids.append(release_id)
            case PromotionOutcome.INCOMPLETE:
                self.incomplete += 1
            case PromotionOutcome.SKIPPED:
                self.skipped += 1


def promote_release(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    release_id: UUID,
) -> PromotionOutcome:
    """Promote one release if its tracks are complete.

    A conditional update that does not apply means another actor moved the release
    first; that is reported as ``SKIPPED``, not an error.
    """

    with unit_of_work_factory() as uow:
        if not check_completeness(uow, release_id).is_complete:
            return PromotionOutcome.INCOMPLETE
        applied = uow.repositories.releases.conditional_transition(
            release_id, ReleaseStatus.PROCESSING, ReleaseStatus.PENDING_REVIEW
        )
        if not applied:
            return PromotionOutcome.SKIPPED
        uow.commit()
    return PromotionOutcome.PROMOTED


def promote_ready_releases(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory,
    batch_size: int = DEFAULT_SWEEP_BATCH_SIZE,
) -> SweepReport:
    """Run a single sweep pass and return its counters.

    Failures are contained per release: the error is logged, counted, and the pass
    moves on to the next candidate.
    """

    if batch_size < 1:
        raise ValueError("batch_size must be positive")

    with unit_of_work_factory() as uow:
        candidates = [
            release.id
            for release in uow.repositories.releases.list_by_status(
                ReleaseStatus.PROCESSING, limit=batch_size, oldest_first=True
            )
        ]

    report = SweepReport(scanned=len(candidates))
    for release_id in candidates:
        try:
            outcome = promote_release(
                unit_of_work_factory=unit_of_work_factory, release_id=release_id
            )
        except Exception:  # noqa: BLE001
            log.exception("Failed to promote release %s; continuing", release_id)
            report.failed += 1
            continue
        report.record(release_id, outcome)
        if outcome is PromotionOutcome.PROMOTED:
            log.info("Release %s promoted to %s", release_id, ReleaseStatus.PENDING_REVIEW)

    if report.scanned:
        log.debug(
            "Sweep pass: scanned=%s promoted=%s incomplete=%s skipped=%s failed=%s",
            report.scanned,
            report.promoted,
            report.incomplete,
            report.skipped,
            report.failed,
        )
    return report


class PromotionSweeper:
    """Background loop running ``promote_ready_releases`` on a fixed interval.

    ``wake()`` asks for an early pass (used right after a submission); the fixed
    interval keeps running regardless, so a missed wake only costs latency.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: ReleaseUnitOfWorkFactory,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        batch_size: int = DEFAULT_SWEEP_BATCH_SIZE,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.unit_of_work_factory = unit_of_work_factory
        self.interval_seconds = interval_seconds
        self.batch_size = batch_size
        self.passes = 0
        self.last_report: SweepReport | None = None
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            raise RuntimeError("Promotion sweeper already running")
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="promotion-sweeper", daemon=True
        )
        self._thread.start()
        log.info(
            "Promotion sweeper started: interval=%ss, batch_size=%s",
            self.interval_seconds,
            self.batch_size,
        )

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait up to ``timeout`` for the thread."""

        self._stop_event.set()
        self._wake_event.set()
        thread = self._thread
        if thread is None:
            return
        thread.join(timeout)
        if thread.is_alive():
            # Still finishing a pass; start() refuses until it has exited.
            log.warning("Promotion sweeper did not stop within %ss", timeout)
            return
        self._thread = None
        log.info("Promotion sweeper stopped")

    def wake(self, _release_id: UUID | None = None) -> None:
        self._wake_event.set()

    def run_once(self) -> SweepReport:
        report = promote_ready_releases(
            unit_of_work_factory=self.unit_of_work_factory,
            batch_size=self.batch_size,
        )
        self.passes += 1
        self.last_report = report
        return report

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._wake_event.wait(self.interval_seconds)
            self._wake_event.clear()
            if self._stop_event.is_set():
                break
            try:
                self.run_once()
            except Exception:  # noqa: BLE001
                log.exception("Promotion sweep pass failed")

    def __enter__(self) -> PromotionSweeper:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()
