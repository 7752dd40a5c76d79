# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
import time
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from releasedesk.app import (
    approve_release,
    build_sweeper,
    list_review_queue,
    reject_release,
    run_promotion_sweep,
)
from releasedesk.config import configure_logging
from releasedesk.domain.errors import ReleaseDeskError
from releasedesk.domain.model import Actor

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Release lifecycle operations")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    worker = subparsers.add_parser("worker", help="Run the promotion sweeper until interrupted")
    worker.add_argument(
        "--interval",
        type=float,
        help="Seconds between sweep passes (defaults to config)",
    )

    sweep = subparsers.add_parser("sweep", help="Run a single promotion sweep pass")
    sweep.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Maximum number of releases to examine (defaults to config)",
    )

    queue = subparsers.add_parser("queue", help="List releases pending review")
    queue.add_argument("--admin-id", type=str, required=True, help="Reviewing admin's user id")

    for name, help_text in (("approve", "Publish a release"), ("reject", "Reject a release")):
        review = subparsers.add_parser(name, help=help_text)
        review.add_argument("release_id", type=str, help="Release to review")
        review.add_argument("--admin-id", type=str, required=True, help="Reviewing admin's user id")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _run_worker(interval: float | None) -> None:
    sweeper = build_sweeper()
    if interval is not None:
        sweeper.interval_seconds = interval
    with sweeper:
        while sweeper.running:
            time.sleep(1.0)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        admin = (
            Actor.admin(_parse_uuid(parsed_args.admin_id))
            if getattr(parsed_args, "admin_id", None) is not None
            else None
        )
        release_id = (
            _parse_uuid(parsed_args.release_id)
            if getattr(parsed_args, "release_id", None) is not None
            else None
        )
        if getattr(parsed_args, "interval", None) is not None and parsed_args.interval <= 0:
            raise ValueError("Interval must be positive")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "worker":
            _run_worker(parsed_args.interval)
        elif parsed_args.command == "sweep":
            report = run_promotion_sweep(batch_size=parsed_args.batch_size)
            for promoted_id in report.promoted_ids:
                print(promoted_id)
        elif parsed_args.command == "queue" and admin is not None:
            for release in list_review_queue(admin):
                print(f"{release.id}\t{release.created_at.isoformat()}\t{release.title}")
        elif parsed_args.command in {"approve", "reject"} and admin and release_id:
            review = approve_release if parsed_args.command == "approve" else reject_release
            result = review(release_id, admin)
            print(f"{result.release_id}\t{result.status}")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ReleaseDeskError as exc:
        log.error("%s: %s", type(exc).__name__, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
