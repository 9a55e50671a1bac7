"""Working tree and upstream settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .env import optional_env_var
from .retry import RetryPolicy, get_retry_policy

DEFAULT_REMOTE = "origin"
DEFAULT_AUTHOR_NAME = "gitbroker"
DEFAULT_AUTHOR_EMAIL = "gitbroker@localhost"


@dataclass(frozen=True, slots=True)
class RepositoryConfig:
    path: Path
    remote: str = DEFAULT_REMOTE
    branch: str | None = None
    author_name: str = DEFAULT_AUTHOR_NAME
    author_email: str = DEFAULT_AUTHOR_EMAIL
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def resolve_path(self) -> Path:
        return self.path.expanduser().resolve()


def get_repository_config(*, path: Path | str | None = None) -> RepositoryConfig:
    env_path = optional_env_var("GITBROKER_REPOSITORY_PATH")
    repo_path = Path(path) if path is not None else Path(env_path or ".")
    return RepositoryConfig(
        path=repo_path,
        remote=optional_env_var("GITBROKER_GIT_REMOTE") or DEFAULT_REMOTE,
        branch=optional_env_var("GITBROKER_GIT_BRANCH"),
        author_name=optional_env_var("GITBROKER_GIT_AUTHOR_NAME") or DEFAULT_AUTHOR_NAME,
        author_email=optional_env_var("GITBROKER_GIT_AUTHOR_EMAIL") or DEFAULT_AUTHOR_EMAIL,
        retry=get_retry_policy(),
    )
