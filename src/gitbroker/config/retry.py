"""Retry policy for writes against the shared upstream repository."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int
from .errors import ConfigurationError

DEFAULT_REMOTE_WRITE_ATTEMPTS = 5
DEFAULT_REMOTE_WRITE_BACKOFF_DELAY_MS = 3000


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """How often and how patiently a rejected push is retried."""

    attempts: int = DEFAULT_REMOTE_WRITE_ATTEMPTS
    backoff_delay_seconds: float = DEFAULT_REMOTE_WRITE_BACKOFF_DELAY_MS / 1000

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigurationError(f"Retry attempts must be positive, got {self.attempts}")
        if self.backoff_delay_seconds < 0:
            raise ConfigurationError(
                f"Retry backoff delay must be non-negative, got {self.backoff_delay_seconds}"
            )


def get_retry_policy() -> RetryPolicy:
    attempts = env_int(
        "GITBROKER_REMOTE_WRITE_ATTEMPTS", DEFAULT_REMOTE_WRITE_ATTEMPTS, minimum=1
    )
    delay_ms = env_int(
        "GITBROKER_REMOTE_WRITE_BACKOFF_DELAY_MS",
        DEFAULT_REMOTE_WRITE_BACKOFF_DELAY_MS,
        minimum=0,
    )
    return RetryPolicy(attempts=attempts, backoff_delay_seconds=delay_ms / 1000)
