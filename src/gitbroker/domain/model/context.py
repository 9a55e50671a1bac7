"""Platform-specific instance context.

The provisioning platform sends a free-form ``context`` object whose fields
depend on the platform. Each variant below declares the fields it is known to
carry; the raw mapping is kept alongside so module inputs see every field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from .enums import Platform

AUTH_URL_FIELD = "auth_url"


def _text(fields: Mapping[str, object], key: str) -> str | None:
    value = fields.get(key)
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True, kw_only=True)
class PlatformContext:
    platform: str
    fields: Mapping[str, object] = field(default_factory=dict[str, object])

    EXCLUDED_MODULE_FIELDS: ClassVar[frozenset[str]] = frozenset({AUTH_URL_FIELD})

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> PlatformContext:
        return cls(platform=_text(fields, "platform") or "", fields=dict(fields))

    def module_inputs(self) -> dict[str, object]:
        """Context fields handed to the reconciliation module, in document order."""

        return {
            key: value
            for key, value in self.fields.items()
            if key not in self.EXCLUDED_MODULE_FIELDS
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class MeshMarketplaceContext(PlatformContext):
    customer_id: str | None = None
    project_id: str | None = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> MeshMarketplaceContext:
        return cls(
            platform=_text(fields, "platform") or "",
            fields=dict(fields),
            customer_id=_text(fields, "customer_id"),
            project_id=_text(fields, "project_id"),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class CloudFoundryContext(PlatformContext):
    organization_guid: str | None = None
    organization_name: str | None = None
    space_guid: str | None = None
    space_name: str | None = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> CloudFoundryContext:
        return cls(
            platform=Platform.CLOUDFOUNDRY,
            fields=dict(fields),
            organization_guid=_text(fields, "organization_guid"),
            organization_name=_text(fields, "organization_name"),
            space_guid=_text(fields, "space_guid"),
            space_name=_text(fields, "space_name"),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class KubernetesContext(PlatformContext):
    namespace: str | None = None
    cluster_id: str | None = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> KubernetesContext:
        return cls(
            platform=Platform.KUBERNETES,
            fields=dict(fields),
            namespace=_text(fields, "namespace"),
            cluster_id=_text(fields, "clusterid"),
        )


_CONTEXT_TYPES: dict[str, type[PlatformContext]] = {
    Platform.CLOUDFOUNDRY: CloudFoundryContext,
    Platform.KUBERNETES: KubernetesContext,
}


def parse_context(fields: Mapping[str, object] | None) -> PlatformContext:
    """Resolve the context variant from its ``platform`` field.

    Marketplace platforms use arbitrary identifiers (``dev.azure``, ``aws.eu``),
    so anything not listed above is read as a marketplace context.
    """

    raw: Mapping[str, object] = fields or {}
    platform = _text(raw, "platform") or ""
    context_type = _CONTEXT_TYPES.get(platform, MeshMarketplaceContext)
    return context_type.from_fields(raw)
