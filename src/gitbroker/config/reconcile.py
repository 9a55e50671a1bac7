"""Reconciliation pass defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_MAX_WORKERS = 1


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    max_workers: int = DEFAULT_MAX_WORKERS


def get_reconcile_config() -> ReconcileConfig:
    return ReconcileConfig(
        max_workers=env_int("GITBROKER_MAX_WORKERS", DEFAULT_MAX_WORKERS, minimum=1)
    )
