"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from gitbroker.adapters.filesystem import (
    FileStatusRecorder,
    InstanceCatalog,
    LocalRepositoryStore,
    write_module,
)
from gitbroker.adapters.git import GitRepositoryStore
from gitbroker.adapters.terraform import TerraformExecutor
from gitbroker.common.layout import RepositoryLayout
from gitbroker.config import (
    get_reconcile_config,
    get_repository_config,
    get_terraform_config,
)
from gitbroker.domain.listing import filter_instances
from gitbroker.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from gitbroker.adapters.filesystem import CatalogError
    from gitbroker.config import ReconcileConfig, RepositoryConfig, TerraformConfig
    from gitbroker.domain.listing import InstanceFilter
    from gitbroker.domain.model import ServiceInstance
    from gitbroker.domain.ports import ProcessRunner, RepositoryStore
    from gitbroker.domain.reconciliation import InstanceReport

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationReport:
    """Outcome of one reconciliation pass."""

    instances: tuple[InstanceReport, ...] = ()
    errors: tuple[CatalogError, ...] = ()
    revision: str | None = None

    def labels(self) -> list[list[str]]:
        return [report.labels() for report in self.instances]


def build_store(config: RepositoryConfig, *, use_git: bool = True) -> RepositoryStore:
    if use_git:
        return GitRepositoryStore.from_config(config)
    return LocalRepositoryStore(config.resolve_path())


def reconcile_repository(
    *,
    repository_config: RepositoryConfig | None = None,
    terraform_config: TerraformConfig | None = None,
    reconcile_config: ReconcileConfig | None = None,
    store: RepositoryStore | None = None,
    runner: ProcessRunner | None = None,
    use_git: bool = True,
) -> ReconciliationReport:
    """Run one reconciliation pass over a fresh snapshot of the repository.

    ``PersistenceError`` propagates: once a write cannot be pushed the pass stops.
    """

    effective_store = store or build_store(
        repository_config or get_repository_config(), use_git=use_git
    )
    effective_reconcile = reconcile_config or get_reconcile_config()

    snapshot = effective_store.snapshot()
    log.info("Starting reconciliation of %s at %s", snapshot.root, snapshot.revision or "-")

    layout = RepositoryLayout(snapshot.root)
    catalog = InstanceCatalog(layout).load()
    engine = ReconciliationEngine(
        layout=layout,
        recorder=FileStatusRecorder(effective_store, layout),
        executor=TerraformExecutor(terraform_config or get_terraform_config(), runner=runner),
        write_module=write_module,
        max_workers=effective_reconcile.max_workers,
        working_tree_lease=effective_store.working_tree_lease,
    )
    reports = engine.run(catalog.instances)

    log.info(
        "Finished reconciliation: instances=%d, units=%d, excluded=%d",
        len(reports),
        sum(len(report.outcomes) for report in reports),
        len(catalog.errors),
    )
    return ReconciliationReport(
        instances=tuple(reports), errors=catalog.errors, revision=snapshot.revision
    )


def list_instances(
    path: Path | str | None = None,
    *,
    instance_filter: InstanceFilter | None = None,
) -> list[ServiceInstance]:
    """Read the catalog of a working tree as-is, without touching upstream."""

    root = Path(path) if path is not None else get_repository_config().resolve_path()
    snapshot = LocalRepositoryStore(root).snapshot()
    catalog = InstanceCatalog.from_snapshot(snapshot).load()
    return filter_instances(catalog.instances, instance_filter)
