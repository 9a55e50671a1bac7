"""Instance catalog read from a repository snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from gitbroker.common.layout import RepositoryLayout

from .schema import BindingDocument, InstanceDocument, ManualParametersAdapter, StatusDocument
from .translator import to_binding, to_service_instance

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from gitbroker.domain.model import Binding, ServiceInstance
    from gitbroker.domain.ports.persistence import RepositorySnapshot

log = getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


class MalformedDocumentError(ValueError):
    """Raised when a repository document cannot be parsed or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True, slots=True)
class CatalogError:
    """An instance that was left out of the catalog."""

    instance_id: str
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"{self.instance_id}: {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    instances: tuple[ServiceInstance, ...] = ()
    errors: tuple[CatalogError, ...] = ()

    def __iter__(self) -> Iterator[ServiceInstance]:
        return iter(self.instances)

    def __len__(self) -> int:
        return len(self.instances)


class InstanceCatalog:
    """Parses ``instances/*`` of a working tree into ``ServiceInstance`` records.

    Every call to ``load`` re-reads the tree; nothing is cached between passes.
    """

    def __init__(self, layout: RepositoryLayout) -> None:
        self.layout = layout

    @classmethod
    def from_snapshot(cls, snapshot: RepositorySnapshot) -> InstanceCatalog:
        return cls(RepositoryLayout(snapshot.root))

    def load(self) -> CatalogSnapshot:
        instances: list[ServiceInstance] = []
        errors: list[CatalogError] = []
        for instance_dir in self._child_dirs(self.layout.instances_dir):
            instance_id = instance_dir.name
            try:
                instances.append(self.load_instance(instance_id))
            except MalformedDocumentError as exc:
                log.warning("Skipping instance %s: %s", instance_id, exc)
                errors.append(CatalogError(instance_id, exc.path, exc.reason))
        return CatalogSnapshot(instances=tuple(instances), errors=tuple(errors))

    def load_instance(self, instance_id: str) -> ServiceInstance:
        layout = self.layout
        document = _read_document(layout.instance_file(instance_id), InstanceDocument)
        status = _read_status(layout.instance_status_file(instance_id))
        manual_parameters = self._read_manual_parameters(layout.manual_params_file(instance_id))
        bindings = [
            self._load_binding(instance_id, binding_dir.name)
            for binding_dir in self._child_dirs(layout.bindings_dir(instance_id))
        ]
        return to_service_instance(
            document,
            status=status,
            bindings=bindings,
            manual_parameters=manual_parameters,
        )

    def _load_binding(self, instance_id: str, binding_id: str) -> Binding:
        layout = self.layout
        document = _read_document(layout.binding_file(instance_id, binding_id), BindingDocument)
        status = _read_status(layout.binding_status_file(instance_id, binding_id))
        return to_binding(document, status=status)

    @staticmethod
    def _read_manual_parameters(path: Path) -> dict[str, Any] | None:
        if not path.is_file():
            return None
        raw = _load_yaml(path)
        if raw is None:
            return {}
        try:
            return ManualParametersAdapter.validate_python(raw)
        except ValidationError as exc:
            raise MalformedDocumentError(path, "expected a mapping of parameters") from exc

    @staticmethod
    def _child_dirs(path: Path) -> list[Path]:
        if not path.is_dir():
            return []
        children = (
            child for child in path.iterdir() if child.is_dir() and not child.name.startswith(".")
        )
        return sorted(children, key=lambda child: child.name)


def _load_yaml(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise MalformedDocumentError(path, f"invalid YAML: {exc}") from exc
    except OSError as exc:
        raise MalformedDocumentError(path, f"unreadable: {exc}") from exc


def _read_document(path: Path, model: type[TModel]) -> TModel:
    if not path.is_file():
        raise MalformedDocumentError(path, "missing definition file")
    raw = _load_yaml(path)
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise MalformedDocumentError(path, errors) from exc


def _read_optional_document(path: Path, model: type[TModel]) -> TModel | None:
    if not path.is_file():
        return None
    return _read_document(path, model)


def _read_status(path: Path) -> StatusDocument | None:
    """Status file contents, or ``None`` when the file is missing or unusable."""

    try:
        return _read_optional_document(path, StatusDocument)
    except MalformedDocumentError as exc:
        log.warning("Ignoring status file %s: %s", exc.path, exc.reason)
        return None
