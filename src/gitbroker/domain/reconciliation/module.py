"""Reconciliation module: the Terraform unit materialised for one binding."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from gitbroker.domain.model import Binding, ServiceInstance

MODULE_NAME: Final[str] = "wrapper"
PLATFORM_SECRET_VARIABLE: Final[str] = "platform_secret"
PLATFORM_SECRET_DESCRIPTION: Final[str] = (
    "The secret that will be used by Terraform to authenticate against the cloud platform."
)


@dataclass(frozen=True, slots=True)
class ReconciliationModule:
    source: str
    inputs: Mapping[str, object] = field(default_factory=dict[str, object])

    def to_document(self) -> dict[str, object]:
        return {
            "variable": {
                PLATFORM_SECRET_VARIABLE: {
                    "description": PLATFORM_SECRET_DESCRIPTION,
                    "type": "string",
                    "sensitive": True,
                },
            },
            "module": {
                MODULE_NAME: {
                    "source": self.source,
                    PLATFORM_SECRET_VARIABLE: f"${{var.{PLATFORM_SECRET_VARIABLE}}}",
                    **self.inputs,
                },
            },
        }

    def render(self) -> str:
        return json.dumps(self.to_document(), indent=2, ensure_ascii=False)


def merge_module_inputs(instance: ServiceInstance, binding: Binding) -> dict[str, object]:
    """Flatten context, parameters and bind resource into one input map.

    Later sources win on key collisions: context, instance parameters, bind
    resource, manual parameters. A key keeps the position of its first
    occurrence.
    """

    inputs: dict[str, object] = instance.context.module_inputs()
    inputs.update(instance.parameters)
    inputs.update(binding.bind_resource)
    if instance.manual_parameters is not None:
        inputs.update(instance.manual_parameters)
    return inputs


def build_module(
    instance: ServiceInstance, binding: Binding, *, source: str
) -> ReconciliationModule:
    return ReconciliationModule(source=source, inputs=merge_module_inputs(instance, binding))
