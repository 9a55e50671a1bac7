"""Terraform init/apply against a materialised module."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gitbroker.adapters.process import SubprocessRunner
from gitbroker.config.terraform import TerraformConfig

if TYPE_CHECKING:
    from pathlib import Path

    from gitbroker.domain.ports.execution import ProcessResult, ProcessRunner

log = getLogger(__name__)

_OUTPUT_TAIL_CHARS = 2000


class TerraformExecutor:
    """Runs ``terraform init`` followed by ``terraform apply`` in a binding directory.

    A non-zero exit of either step counts as a failed apply; ``apply`` is not
    attempted after a failed ``init``.
    """

    def __init__(
        self,
        config: TerraformConfig | None = None,
        *,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.config = config or TerraformConfig()
        self.runner: ProcessRunner = runner or SubprocessRunner()

    def commands(self) -> tuple[tuple[str, ...], ...]:
        binary = self.config.binary
        return (
            (binary, "init", "-input=false", "-no-color"),
            (binary, "apply", "-auto-approve", "-input=false", "-no-color"),
        )

    def environment(self) -> dict[str, str]:
        env = {"TF_IN_AUTOMATION": "1", "TF_INPUT": "0"}
        if self.config.platform_secret is not None:
            env["TF_VAR_platform_secret"] = self.config.platform_secret
        return env

    def apply(self, working_dir: Path) -> bool:
        env = self.environment()
        for command in self.commands():
            result = self.runner(
                command,
                cwd=working_dir,
                env=env,
                timeout=self.config.timeout_seconds,
            )
            if not result.succeeded:
                _log_failure(result, working_dir)
                return False
        return True


def _log_failure(result: ProcessResult, working_dir: Path) -> None:
    log.warning(
        "'%s' exited with %d in %s: %s",
        " ".join(result.args[:2]),
        result.returncode,
        working_dir,
        (result.stderr or result.stdout)[-_OUTPUT_TAIL_CHARS:].strip(),
    )
