"""Public domain model surface."""

from __future__ import annotations

from .catalog import Binding, ServiceDefinition, ServiceInstance, ServicePlan
from .context import (
    AUTH_URL_FIELD,
    CloudFoundryContext,
    KubernetesContext,
    MeshMarketplaceContext,
    PlatformContext,
    parse_context,
)
from .enums import Platform, StatusValue
from .status import Status, status_value_of

__all__ = [
    "AUTH_URL_FIELD",
    "Binding",
    "CloudFoundryContext",
    "KubernetesContext",
    "MeshMarketplaceContext",
    "Platform",
    "PlatformContext",
    "ServiceDefinition",
    "ServiceInstance",
    "ServicePlan",
    "Status",
    "StatusValue",
    "parse_context",
    "status_value_of",
]
