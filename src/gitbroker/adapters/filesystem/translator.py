"""Translate repository documents into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitbroker.domain.model import (
    Binding,
    ServiceDefinition,
    ServiceInstance,
    ServicePlan,
    Status,
    parse_context,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .schema import BindingDocument, InstanceDocument, StatusDocument


def to_status(document: StatusDocument | None) -> Status | None:
    if document is None:
        return None
    return Status(document.status, document.description)


def to_binding(document: BindingDocument, *, status: StatusDocument | None = None) -> Binding:
    return Binding(
        binding_id=document.binding_id,
        instance_id=document.service_instance_id,
        service_definition_id=document.service_definition_id,
        parameters=dict(document.parameters),
        bind_resource=dict(document.bind_resource),
        status=to_status(status),
    )


def to_service_instance(
    document: InstanceDocument,
    *,
    status: StatusDocument | None = None,
    bindings: Iterable[Binding] = (),
    manual_parameters: Mapping[str, object] | None = None,
) -> ServiceInstance:
    definition = document.service_definition
    return ServiceInstance(
        instance_id=document.service_instance_id,
        service_definition_id=document.service_definition_id,
        plan_id=document.plan_id,
        service_definition=ServiceDefinition(
            id=definition.id or document.service_definition_id,
            name=definition.name,
            plans=tuple(
                ServicePlan(
                    id=plan.id,
                    name=plan.name,
                    manual_instance_input_needed=plan.metadata.manual_instance_input_needed,
                )
                for plan in definition.plans
            ),
        ),
        parameters=dict(document.parameters),
        context=parse_context(document.context),
        deleted=document.deleted,
        status=to_status(status),
        bindings=tuple(bindings),
        manual_parameters=None if manual_parameters is None else dict(manual_parameters),
    )
