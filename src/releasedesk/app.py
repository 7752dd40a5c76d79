"""Application orchestration entry points.

These wire the domain services to the SQLAlchemy store using configuration from
the environment. The route layer and the CLI call these; tests usually call the
domain functions directly with their own unit-of-work factory.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from releasedesk.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from releasedesk.config import get_workflow_config
from releasedesk.domain import review, submission
from releasedesk.domain.promotion import PromotionSweeper, SweepReport, promote_ready_releases

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from releasedesk.config import WorkflowConfig
    from releasedesk.domain.model import Actor, Release
    from releasedesk.domain.ports import ReleaseUnitOfWorkFactory
    from releasedesk.domain.review import ReviewResult
    from releasedesk.domain.submission import SubmissionResult


log = getLogger(__name__)


def _default_unit_of_work_factory() -> ReleaseUnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_sweeper(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
    config: WorkflowConfig | None = None,
) -> PromotionSweeper:
    """Create (but do not start) the background promotion sweeper."""

    effective_config = config or get_workflow_config()
    return PromotionSweeper(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        interval_seconds=effective_config.sweep_interval_seconds,
        batch_size=effective_config.sweep_batch_size,
    )


def run_promotion_sweep(
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
    batch_size: int | None = None,
) -> SweepReport:
    """Run one promotion pass outside the background loop."""

    effective_batch = batch_size or get_workflow_config().sweep_batch_size
    report = promote_ready_releases(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        batch_size=effective_batch,
    )
    log.info(
        "Finished promotion sweep: scanned=%s, promoted=%s, incomplete=%s, skipped=%s, failed=%s",
        report.scanned,
        report.promoted,
        report.incomplete,
        report.skipped,
        report.failed,
    )
    return report


def submit_release(
    release_id: UUID,
    actor: Actor,
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
    on_processing_started: Callable[[UUID], None] | None = None,
) -> SubmissionResult:
    return submission.submit_release(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        release_id=release_id,
        actor=actor,
        on_processing_started=on_processing_started,
    )


def approve_release(
    release_id: UUID,
    actor: Actor,
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
) -> ReviewResult:
    return review.approve_release(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        release_id=release_id,
        actor=actor,
    )


def reject_release(
    release_id: UUID,
    actor: Actor,
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
) -> ReviewResult:
    return review.reject_release(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        release_id=release_id,
        actor=actor,
    )


def list_review_queue(
    actor: Actor,
    *,
    unit_of_work_factory: ReleaseUnitOfWorkFactory | None = None,
) -> Sequence[Release]:
    return review.list_pending_review(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        actor=actor,
    )
