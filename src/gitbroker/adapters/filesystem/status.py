"""Status files: one ``status.yml`` per instance and per binding."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import yaml

from .files import atomic_write_text

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from gitbroker.common.layout import RepositoryLayout
    from gitbroker.domain.model import Binding, ServiceInstance, Status
    from gitbroker.domain.ports.persistence import RepositoryStore

log = getLogger(__name__)

# keep descriptions on one line
_YAML_WIDTH: Final[int] = 1 << 16


def render_status(status: Status) -> str:
    """``status: <value>\\ndescription: <text>\\n``"""

    return yaml.safe_dump(
        {"status": str(status.value), "description": status.description},
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=_YAML_WIDTH,
    )


class FileStatusRecorder:
    """Writes status files and commits them through the repository store.

    The instance status always mirrors the binding status of the event that
    determined it; both files go into the same commit.
    """

    def __init__(self, store: RepositoryStore, layout: RepositoryLayout) -> None:
        self._store = store
        self._layout = layout

    def record(self, target: Path, status: Status) -> Path:
        return atomic_write_text(target, render_status(status))

    def record_instance(self, instance: ServiceInstance, status: Status) -> None:
        message = f"Update status of instance {instance.instance_id}: {status.value}"
        with self._store.unit_of_work(message) as uow:
            uow.stage(self.record(self._layout.instance_status_file(instance.instance_id), status))
            uow.commit()
        log.debug("Recorded %s for instance %s", status.value, instance.instance_id)

    def record_binding(
        self,
        instance: ServiceInstance,
        binding: Binding,
        status: Status,
        *,
        attachments: Sequence[Path] = (),
    ) -> None:
        instance_id = instance.instance_id
        binding_id = binding.binding_id
        message = f"Update status of binding {instance_id}/{binding_id}: {status.value}"
        with self._store.unit_of_work(message) as uow:
            binding_status_file = self._layout.binding_status_file(instance_id, binding_id)
            uow.stage(self.record(binding_status_file, status))
            uow.stage(self.record(self._layout.instance_status_file(instance_id), status))
            for path in attachments:
                uow.stage(path)
            uow.commit()
        log.debug("Recorded %s for binding %s/%s", status.value, instance_id, binding_id)
