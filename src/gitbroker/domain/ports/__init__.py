"""Domain port definitions for adapters."""

from __future__ import annotations

from .execution import (
    ModuleExecutor,
    ProcessError,
    ProcessResult,
    ProcessRunner,
    ProcessStartError,
    ProcessTimeoutError,
)
from .persistence import (
    ModuleWriter,
    PersistenceError,
    RepositorySnapshot,
    RepositoryStore,
    StatusRecorder,
)

__all__ = [
    "ModuleExecutor",
    "ModuleWriter",
    "PersistenceError",
    "ProcessError",
    "ProcessResult",
    "ProcessRunner",
    "ProcessStartError",
    "ProcessTimeoutError",
    "RepositorySnapshot",
    "RepositoryStore",
    "StatusRecorder",
]
