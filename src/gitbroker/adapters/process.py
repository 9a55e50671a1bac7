"""Subprocess-backed process runner."""

from __future__ import annotations

import os
import subprocess
from logging import getLogger
from typing import TYPE_CHECKING

from gitbroker.domain.ports.execution import ProcessResult, ProcessStartError, ProcessTimeoutError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

log = getLogger(__name__)


class SubprocessRunner:
    """Runs commands with ``subprocess.run`` and captures their output.

    ``env`` entries are layered over the current process environment. On timeout
    the child is killed before ``ProcessTimeoutError`` is raised.
    """

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        command = tuple(args)
        merged_env = {**os.environ, **env} if env else None
        log.debug("Running %s in %s", " ".join(command), cwd)
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                cwd=cwd,
                env=merged_env,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeoutError(f"{command[0]} timed out after {timeout}s in {cwd}") from exc
        except OSError as exc:
            raise ProcessStartError(f"Could not start {command[0]}: {exc}") from exc
        return ProcessResult(
            args=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
