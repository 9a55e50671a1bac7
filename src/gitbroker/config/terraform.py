"""Terraform invocation settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, optional_env_var

DEFAULT_TERRAFORM_BINARY = "terraform"
DEFAULT_TERRAFORM_TIMEOUT_SECONDS = 1800.0


@dataclass(frozen=True, slots=True)
class TerraformConfig:
    binary: str = DEFAULT_TERRAFORM_BINARY
    timeout_seconds: float = DEFAULT_TERRAFORM_TIMEOUT_SECONDS
    # opaque reference handed to the module as TF_VAR_platform_secret
    platform_secret: str | None = field(default=None, repr=False)


def get_terraform_config() -> TerraformConfig:
    return TerraformConfig(
        binary=optional_env_var("GITBROKER_TERRAFORM_BINARY") or DEFAULT_TERRAFORM_BINARY,
        timeout_seconds=env_float(
            "GITBROKER_TERRAFORM_TIMEOUT_SECONDS",
            DEFAULT_TERRAFORM_TIMEOUT_SECONDS,
            minimum=1.0,
        ),
        platform_secret=optional_env_var("GITBROKER_PLATFORM_SECRET"),
    )
