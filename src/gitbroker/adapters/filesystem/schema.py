"""Pydantic models describing the YAML documents in the repository."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from gitbroker.domain.model import StatusValue


def _none_to_empty(value: object) -> object:
    return {} if value is None else value


def _to_text(value: object) -> object:
    # ids are sometimes written as bare YAML numbers
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PlanMetadataDocument(DocumentModel):
    manual_instance_input_needed: bool = Field(default=False, alias="manualInstanceInputNeeded")


class PlanDocument(DocumentModel):
    id: str
    name: str | None = None
    metadata: PlanMetadataDocument = Field(default_factory=PlanMetadataDocument)

    _normalize_id = field_validator("id", mode="before")(_to_text)

    @field_validator("metadata", mode="before")
    @classmethod
    def _default_metadata(cls, value: object) -> object:
        return {} if value is None else value


class ServiceDefinitionDocument(DocumentModel):
    id: str | None = None
    name: str = ""
    plans: list[PlanDocument] = Field(default_factory=list)

    _normalize_id = field_validator("id", mode="before")(_to_text)

    @field_validator("plans", mode="before")
    @classmethod
    def _default_plans(cls, value: object) -> object:
        return [] if value is None else value


class InstanceDocument(DocumentModel):
    service_instance_id: str = Field(alias="serviceInstanceId")
    service_definition_id: str = Field(alias="serviceDefinitionId")
    plan_id: str = Field(alias="planId")
    service_definition: ServiceDefinitionDocument = Field(
        default_factory=ServiceDefinitionDocument, alias="serviceDefinition"
    )
    parameters: dict[str, Any] = Field(default_factory=dict)
    context: dict[str, Any] = Field(default_factory=dict)
    deleted: bool | None = None

    _normalize_ids = field_validator(
        "service_instance_id", "service_definition_id", "plan_id", mode="before"
    )(_to_text)
    _normalize_maps = field_validator("parameters", "context", mode="before")(_none_to_empty)


class BindingDocument(DocumentModel):
    binding_id: str = Field(alias="bindingId")
    service_instance_id: str = Field(alias="serviceInstanceId")
    service_definition_id: str = Field(alias="serviceDefinitionId")
    parameters: dict[str, Any] = Field(default_factory=dict)
    bind_resource: dict[str, Any] = Field(default_factory=dict, alias="bindResource")

    _normalize_ids = field_validator(
        "binding_id", "service_instance_id", "service_definition_id", mode="before"
    )(_to_text)
    _normalize_maps = field_validator("parameters", "bind_resource", mode="before")(
        _none_to_empty
    )


class StatusDocument(DocumentModel):
    status: StatusValue
    description: str = ""

    @field_validator("status")
    @classmethod
    def _reject_empty(cls, value: StatusValue) -> StatusValue:
        if value is StatusValue.EMPTY:
            raise ValueError("EMPTY is not a valid stored status")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: object) -> object:
        return "" if value is None else value


ManualParametersAdapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])
