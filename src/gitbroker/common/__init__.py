from __future__ import annotations

from .gate import WorkingTreeGate
from .layout import RepositoryLayout
from .unit_of_work import RepositoryUnitOfWork

__all__ = ["RepositoryLayout", "RepositoryUnitOfWork", "WorkingTreeGate"]
