"""Service instances and bindings as read from the repository."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .context import MeshMarketplaceContext, PlatformContext
from .enums import StatusValue
from .status import Status, status_value_of


@dataclass(frozen=True, slots=True, kw_only=True)
class ServicePlan:
    id: str
    name: str | None = None
    manual_instance_input_needed: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ServiceDefinition:
    id: str
    name: str = ""
    plans: tuple[ServicePlan, ...] = ()

    def plan(self, plan_id: str) -> ServicePlan | None:
        return next((plan for plan in self.plans if plan.id == plan_id), None)


@dataclass(frozen=True, slots=True, kw_only=True)
class Binding:
    binding_id: str
    instance_id: str
    service_definition_id: str
    parameters: Mapping[str, object] = field(default_factory=dict[str, object])
    bind_resource: Mapping[str, object] = field(default_factory=dict[str, object])
    status: Status | None = None

    @property
    def status_value(self) -> StatusValue:
        return status_value_of(self.status)


@dataclass(frozen=True, slots=True, kw_only=True)
class ServiceInstance:
    instance_id: str
    service_definition_id: str
    plan_id: str
    service_definition: ServiceDefinition
    parameters: Mapping[str, object] = field(default_factory=dict[str, object])
    context: PlatformContext = field(
        default_factory=lambda: MeshMarketplaceContext(platform="")
    )
    deleted: bool | None = None
    status: Status | None = None
    bindings: tuple[Binding, ...] = ()
    # None means no params.yml next to the instance
    manual_parameters: Mapping[str, object] | None = None

    @property
    def plan(self) -> ServicePlan | None:
        return self.service_definition.plan(self.plan_id)

    @property
    def requires_manual_input(self) -> bool:
        plan = self.plan
        return plan is not None and plan.manual_instance_input_needed

    @property
    def awaiting_manual_input(self) -> bool:
        return self.requires_manual_input and self.manual_parameters is None

    @property
    def status_value(self) -> StatusValue:
        return status_value_of(self.status)
