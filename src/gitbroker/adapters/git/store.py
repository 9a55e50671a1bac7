"""Git-backed repository store with retried pushes."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

from git import Actor, GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from gitbroker.adapters.filesystem.store import LocalRepositoryStore
from gitbroker.config.repository import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME, DEFAULT_REMOTE
from gitbroker.config.retry import RetryPolicy
from gitbroker.domain.ports.persistence import PersistenceError, RepositorySnapshot

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from gitbroker.config.repository import RepositoryConfig

log = getLogger(__name__)


class GitRepositoryStore(LocalRepositoryStore):
    """Working tree of a git clone shared with other writers through ``remote``.

    Every commit is pushed right away. A rejected push is followed by a rebase
    onto upstream and another attempt, up to ``retry.attempts`` pushes in total.
    Commits that could not be pushed stay local and are pushed by the next
    ``snapshot()``.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        remote: str = DEFAULT_REMOTE,
        branch: str | None = None,
        retry: RetryPolicy | None = None,
        author: Actor | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(root)
        try:
            self._repo = Repo(self.root)
        except (InvalidGitRepositoryError, NoSuchPathError) as exc:
            raise PersistenceError(f"Not a git repository: {self.root}") from exc
        self._remote = remote
        self._branch = branch
        self._retry = retry or RetryPolicy()
        self._author = author or Actor(DEFAULT_AUTHOR_NAME, DEFAULT_AUTHOR_EMAIL)
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: RepositoryConfig) -> GitRepositoryStore:
        return cls(
            config.resolve_path(),
            remote=config.remote,
            branch=config.branch,
            retry=config.retry,
            author=Actor(config.author_name, config.author_email),
        )

    @property
    def repo(self) -> Repo:
        return self._repo

    @property
    def branch(self) -> str:
        return self._branch or self._repo.active_branch.name

    @property
    def has_remote(self) -> bool:
        return any(remote.name == self._remote for remote in self._repo.remotes)

    def snapshot(self) -> RepositorySnapshot:
        with self._lock:
            if self.has_remote:
                try:
                    self._synchronize()
                except GitCommandError as exc:
                    raise PersistenceError(
                        f"Could not synchronise with {self._remote}/{self.branch}"
                    ) from exc
                if self.unpushed_commits() > 0:
                    log.info("Pushing commits left over from an earlier pass")
                    self._push_with_retry()
            return RepositorySnapshot(root=self.root, revision=self._head_revision())

    def commit_and_push(self, changed_paths: Sequence[Path], message: str) -> None:
        with self._lock:
            relative = [self.relative(path) for path in changed_paths]
            if not relative:
                return
            index = self._repo.index
            index.add(relative)
            if self._head_revision() is not None and not index.diff("HEAD"):
                log.debug("Nothing changed for %r, skipping commit", message)
                return
            commit = index.commit(message, author=self._author, committer=self._author)
            log.info("Committed %s: %s", commit.hexsha[:8], message)
            self._push_with_retry()

    def unpushed_commits(self) -> int:
        if self._head_revision() is None:
            return 0
        upstream = self._upstream_ref()
        if upstream is None:
            return len(list(self._repo.iter_commits("HEAD")))
        return int(self._repo.git.rev_list("--count", f"{upstream}..HEAD"))

    def _push_with_retry(self) -> None:
        if not self.has_remote:
            return
        attempts = self._retry.attempts
        last_error: GitCommandError | None = None
        for attempt in range(1, attempts + 1):
            try:
                self._repo.git.push(self._remote, f"HEAD:refs/heads/{self.branch}")
            except GitCommandError as exc:
                last_error = exc
                log.warning(
                    "Push to %s/%s rejected (attempt %d of %d): %s",
                    self._remote,
                    self.branch,
                    attempt,
                    attempts,
                    exc.stderr.strip() if isinstance(exc.stderr, str) else exc,
                )
                if attempt == attempts:
                    break
                self._sleep(self._retry.backoff_delay_seconds)
                try:
                    self._synchronize()
                except GitCommandError as sync_exc:
                    last_error = sync_exc
                    log.warning("Re-synchronising with upstream failed: %s", sync_exc)
            else:
                log.debug("Pushed to %s/%s", self._remote, self.branch)
                return
        raise PersistenceError(
            f"Push to {self._remote}/{self.branch} failed after {attempts} attempt(s); "
            "local commits are kept and will be pushed on the next pass"
        ) from last_error

    def _synchronize(self) -> None:
        """Fetch upstream and replay local commits on top of it.

        Conflicting hunks are resolved in favour of the local commits, which carry
        the newest status written by this process. The tree is only rewritten once
        every working tree lease has been returned.
        """

        self._repo.git.fetch(self._remote)
        upstream = self._upstream_ref()
        if upstream is None:
            return
        with self._gate.exclusive():
            if self._head_revision() is None:
                self._repo.git.reset("--hard", upstream)
                return
            try:
                self._repo.git.rebase("--autostash", "-X", "theirs", upstream)
            except GitCommandError:
                self._abort_rebase()
                raise

    def _abort_rebase(self) -> None:
        try:
            self._repo.git.rebase("--abort")
        except GitCommandError:
            log.debug("No rebase in progress to abort")

    def _upstream_ref(self) -> str | None:
        ref = f"{self._remote}/{self.branch}"
        try:
            self._repo.git.rev_parse("--verify", "--quiet", f"refs/remotes/{ref}")
        except GitCommandError:
            return None
        return ref

    def _head_revision(self) -> str | None:
        if not self._repo.head.is_valid():
            return None
        return self._repo.head.commit.hexsha
