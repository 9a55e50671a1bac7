"""Repository store over a plain directory without version control."""

from __future__ import annotations

import threading
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from gitbroker.common.gate import WorkingTreeGate
from gitbroker.common.unit_of_work import RepositoryUnitOfWork
from gitbroker.domain.ports.persistence import RepositorySnapshot

if TYPE_CHECKING:
    from collections.abc import Sequence
    from contextlib import AbstractContextManager

log = getLogger(__name__)


class LocalRepositoryStore:
    """Serves a working tree as-is; writes are final once they hit the disk.

    Used for dry runs against a checkout managed by someone else, and as the
    base for the git-backed store, which adds synchronisation with upstream.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()
        self._lock = threading.RLock()
        self._gate = WorkingTreeGate()
        self.commits: list[tuple[tuple[Path, ...], str]] = []

    def snapshot(self) -> RepositorySnapshot:
        with self._lock:
            return RepositorySnapshot(root=self.root)

    def commit_and_push(self, changed_paths: Sequence[Path], message: str) -> None:
        with self._lock:
            paths = tuple(changed_paths)
            self.commits.append((paths, message))
            log.debug("Recorded %d file(s) without version control: %s", len(paths), message)

    def unit_of_work(self, message: str) -> RepositoryUnitOfWork:
        return RepositoryUnitOfWork(self, self._lock, message)

    def relative(self, path: Path) -> str:
        return Path(path).resolve().relative_to(self.root).as_posix()

    def working_tree_lease(self) -> AbstractContextManager[None]:
        """Keep upstream synchronisation away from the tree while held."""

        return self._gate.shared()
