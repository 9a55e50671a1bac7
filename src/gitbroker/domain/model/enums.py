"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class StatusValue(StrEnum):
    """Lifecycle state persisted in ``status.yml``.

    ``EMPTY`` is never written; it stands for "no status file present".
    """

    IN_PROGRESS = "in progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EMPTY = "EMPTY"


class Platform(StrEnum):
    """Platform identifiers with a dedicated context shape."""

    CLOUDFOUNDRY = "cloudfoundry"
    KUBERNETES = "kubernetes"
