"""Public interface for the Terraform adapter."""

from __future__ import annotations

from .executor import TerraformExecutor

__all__ = ["TerraformExecutor"]
