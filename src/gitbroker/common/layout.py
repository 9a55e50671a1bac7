"""Paths of the instance/binding file tree inside a repository working copy."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

INSTANCES_DIR: Final[str] = "instances"
BINDINGS_DIR: Final[str] = "bindings"
TERRAFORM_DIR: Final[str] = "terraform"

INSTANCE_FILENAME: Final[str] = "instance.yml"
BINDING_FILENAME: Final[str] = "binding.yml"
STATUS_FILENAME: Final[str] = "status.yml"
MANUAL_PARAMS_FILENAME: Final[str] = "params.yml"
MODULE_FILENAME: Final[str] = "module.tf.json"


@dataclass(frozen=True, slots=True)
class RepositoryLayout:
    root: Path

    @property
    def instances_dir(self) -> Path:
        return self.root / INSTANCES_DIR

    def instance_dir(self, instance_id: str) -> Path:
        return self.instances_dir / instance_id

    def instance_file(self, instance_id: str) -> Path:
        return self.instance_dir(instance_id) / INSTANCE_FILENAME

    def instance_status_file(self, instance_id: str) -> Path:
        return self.instance_dir(instance_id) / STATUS_FILENAME

    def manual_params_file(self, instance_id: str) -> Path:
        return self.instance_dir(instance_id) / MANUAL_PARAMS_FILENAME

    def bindings_dir(self, instance_id: str) -> Path:
        return self.instance_dir(instance_id) / BINDINGS_DIR

    def binding_dir(self, instance_id: str, binding_id: str) -> Path:
        return self.bindings_dir(instance_id) / binding_id

    def binding_file(self, instance_id: str, binding_id: str) -> Path:
        return self.binding_dir(instance_id, binding_id) / BINDING_FILENAME

    def binding_status_file(self, instance_id: str, binding_id: str) -> Path:
        return self.binding_dir(instance_id, binding_id) / STATUS_FILENAME

    def module_file(self, instance_id: str, binding_id: str) -> Path:
        return self.binding_dir(instance_id, binding_id) / MODULE_FILENAME

    def terraform_dir(self, service_definition_id: str) -> Path:
        return self.root / TERRAFORM_DIR / service_definition_id

    def module_source(self, service_definition_id: str) -> str:
        """Module ``source`` as seen from a binding directory.

        Terraform resolves local sources relative to the module file, which lives
        four levels below the repository root.
        """

        return f"../../../../{TERRAFORM_DIR}/{service_definition_id}"
