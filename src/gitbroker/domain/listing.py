"""Catalog listing: filters and profile-specific columns for reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from gitbroker.domain.model import CloudFoundryContext, MeshMarketplaceContext, StatusValue

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gitbroker.domain.model import Binding, ServiceInstance, Status


class ListingProfile(StrEnum):
    """Platform profile whose context fields become extra columns."""

    MESHMARKETPLACE = "meshmarketplace"
    CLOUDFOUNDRY = "cloudfoundry"


BASE_HEADERS = ("id", "service", "plan", "status", "deleted")

_PROFILE_HEADERS: dict[ListingProfile, tuple[str, str]] = {
    ListingProfile.MESHMARKETPLACE: ("customer", "project"),
    ListingProfile.CLOUDFOUNDRY: ("organization", "space"),
}


@dataclass(frozen=True, slots=True)
class InstanceFilter:
    """Matches instances by status value and deletion flag.

    ``StatusValue.EMPTY`` matches instances without a status file.
    """

    status: StatusValue | None = None
    deleted: bool | None = None

    def __call__(self, instance: ServiceInstance) -> bool:
        if self.status is not None and instance.status_value is not self.status:
            return False
        return self.deleted is None or instance.deleted is self.deleted


def filter_instances(
    instances: Iterable[ServiceInstance], instance_filter: InstanceFilter | None = None
) -> list[ServiceInstance]:
    matches = instance_filter or InstanceFilter()
    return [instance for instance in instances if matches(instance)]


def profile_headers(profile: ListingProfile | None) -> tuple[str, ...]:
    if profile is None:
        return ()
    return _PROFILE_HEADERS[profile]


def profile_values(instance: ServiceInstance, profile: ListingProfile | None) -> tuple[str, ...]:
    context = instance.context
    match profile:
        case None:
            return ()
        case ListingProfile.MESHMARKETPLACE if isinstance(context, MeshMarketplaceContext):
            return (context.customer_id or "", context.project_id or "")
        case ListingProfile.CLOUDFOUNDRY if isinstance(context, CloudFoundryContext):
            return (context.organization_name or "", context.space_name or "")
        case _:
            return ("",) * len(profile_headers(profile))


def table_headers(profile: ListingProfile | None) -> tuple[str, ...]:
    return (BASE_HEADERS[0], *profile_headers(profile), *BASE_HEADERS[1:])


def table_row(instance: ServiceInstance, profile: ListingProfile | None) -> tuple[str, ...]:
    plan = instance.plan
    return (
        instance.instance_id,
        *profile_values(instance, profile),
        instance.service_definition.name,
        (plan.name or "") if plan is not None else "",
        "" if instance.status is None else str(instance.status.value),
        "" if instance.deleted is None else str(instance.deleted).lower(),
    )


def _status_to_dict(status: Status | None) -> dict[str, str] | None:
    if status is None:
        return None
    return {"status": str(status.value), "description": status.description}


def _binding_to_dict(binding: Binding) -> dict[str, object]:
    return {
        "binding": {
            "bindingId": binding.binding_id,
            "serviceInstanceId": binding.instance_id,
            "serviceDefinitionId": binding.service_definition_id,
            "parameters": dict(binding.parameters),
            "bindResource": dict(binding.bind_resource),
        },
        "status": _status_to_dict(binding.status),
    }


def instance_to_dict(instance: ServiceInstance) -> dict[str, object]:
    """Structured view of an instance as stored in the repository."""

    definition = instance.service_definition
    plan = instance.plan
    document: dict[str, object] = {
        "serviceInstanceId": instance.instance_id,
        "serviceDefinitionId": instance.service_definition_id,
        "planId": instance.plan_id,
        "serviceDefinition": {
            "id": definition.id,
            "name": definition.name,
            "plans": [
                {
                    "id": p.id,
                    "name": p.name,
                    "metadata": {"manualInstanceInputNeeded": p.manual_instance_input_needed},
                }
                for p in definition.plans
            ],
        },
        "parameters": dict(instance.parameters),
        "context": dict(instance.context.fields),
    }
    if instance.deleted is not None:
        document["deleted"] = instance.deleted
    return {
        "instance": document,
        "servicePlan": None if plan is None else {"id": plan.id, "name": plan.name},
        "status": _status_to_dict(instance.status),
        "bindings": [_binding_to_dict(binding) for binding in instance.bindings],
    }
