"""Unit of work grouping file writes into one repository commit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pathlib import Path
    from threading import RLock
    from types import TracebackType

    from gitbroker.domain.ports.persistence import RepositoryStore


class RepositoryUnitOfWork:
    """Holds the store's write lock while files are written and staged.

    Paths staged inside the ``with`` block are handed to the store as a single
    ``commit_and_push`` call on ``commit()``. Leaving the block with an exception
    drops the staged paths; files already written stay in the working tree and
    are overwritten by the next pass.
    """

    def __init__(self, store: RepositoryStore, lock: RLock, message: str) -> None:
        self._store = store
        self._lock = lock
        self.message = message
        self._staged: list[Path] = []

    def __enter__(self) -> RepositoryUnitOfWork:
        self._lock.acquire()
        self._staged = []
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self._lock.release()
        return False  # don't swallow exceptions

    @property
    def staged(self) -> tuple[Path, ...]:
        return tuple(self._staged)

    def stage(self, path: Path) -> None:
        if path not in self._staged:
            self._staged.append(path)

    def commit(self) -> None:
        if not self._staged:
            return
        paths = tuple(self._staged)
        self._staged.clear()
        self._store.commit_and_push(paths, self.message)

    def rollback(self) -> None:
        self._staged.clear()
