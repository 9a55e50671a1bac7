"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .repository import RepositoryConfig, get_repository_config
from .retry import RetryPolicy, get_retry_policy
from .terraform import TerraformConfig, get_terraform_config

__all__ = [
    "ConfigurationError",
    "ReconcileConfig",
    "RepositoryConfig",
    "RetryPolicy",
    "TerraformConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_reconcile_config",
    "get_repository_config",
    "get_retry_policy",
    "get_terraform_config",
    "optional_env_var",
]
