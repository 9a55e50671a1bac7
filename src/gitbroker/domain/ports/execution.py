"""Ports for running the external infrastructure tool."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path


class ProcessError(RuntimeError):
    """Raised when a process invocation could not be carried out."""


class ProcessStartError(ProcessError):
    """Raised when the executable could not be started."""


class ProcessTimeoutError(ProcessError):
    """Raised when a process exceeded its timeout and was terminated."""


@dataclass(frozen=True, slots=True)
class ProcessResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs one command to completion.

    Implementations raise ``ProcessStartError`` or ``ProcessTimeoutError`` when the
    command cannot be carried out; a non-zero exit code is a regular result.
    """

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult: ...


@runtime_checkable
class ModuleExecutor(Protocol):
    """Applies the module materialised in ``working_dir``.

    Returns ``True`` when the tool reports success and ``False`` when it ran but
    reported failure. Anything else surfaces as an exception.
    """

    def apply(self, working_dir: Path) -> bool: ...
