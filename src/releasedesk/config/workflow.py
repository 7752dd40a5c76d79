"""Promotion sweep defaults for the background worker."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_SWEEP_INTERVAL_SECONDS = 5.0
DEFAULT_SWEEP_BATCH_SIZE = 50


@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    sweep_batch_size: int = DEFAULT_SWEEP_BATCH_SIZE


def get_workflow_config() -> WorkflowConfig:
    return WorkflowConfig(
        sweep_interval_seconds=env_float(
            "RELEASEDESK_SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS
        ),
        sweep_batch_size=env_int("RELEASEDESK_SWEEP_BATCH_SIZE", DEFAULT_SWEEP_BATCH_SIZE),
    )
