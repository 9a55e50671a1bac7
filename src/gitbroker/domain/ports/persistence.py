"""Ports for reading and writing the shared repository."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from contextlib import AbstractContextManager
    from pathlib import Path

    from gitbroker.common.unit_of_work import RepositoryUnitOfWork
    from gitbroker.domain.model import Binding, ServiceInstance, Status
    from gitbroker.domain.reconciliation.module import ReconciliationModule


class PersistenceError(RuntimeError):
    """Raised when a write cannot be made durable upstream."""


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Local working tree synchronised with upstream at ``revision``."""

    root: Path
    revision: str | None = None


@runtime_checkable
class RepositoryStore(Protocol):
    """Serialized, retry-safe access to the versioned file tree."""

    def snapshot(self) -> RepositorySnapshot: ...

    def commit_and_push(self, changed_paths: Sequence[Path], message: str) -> None: ...

    def unit_of_work(self, message: str) -> RepositoryUnitOfWork: ...

    def working_tree_lease(self) -> AbstractContextManager[None]: ...


@runtime_checkable
class StatusRecorder(Protocol):
    """Durably records the outcome of a reconciliation event."""

    def record(self, target: Path, status: Status) -> Path: ...

    def record_instance(self, instance: ServiceInstance, status: Status) -> None: ...

    def record_binding(
        self,
        instance: ServiceInstance,
        binding: Binding,
        status: Status,
        *,
        attachments: Sequence[Path] = (),
    ) -> None: ...


@runtime_checkable
class ModuleWriter(Protocol):
    """Materialises a reconciliation module at ``target`` and returns the path."""

    def __call__(self, target: Path, module: ReconciliationModule) -> Path: ...
