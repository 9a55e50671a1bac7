"""Reconciliation pass over a catalog snapshot.

For every binding the engine decides whether the external tool has to run, runs
it, and hands the resulting status to the recorder. A binding waiting for manual
input is reported pending even when its module directory is missing. Nothing is
skipped on account of a previously recorded status: each pass re-evaluates every
binding.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from gitbroker.domain.model import Status, StatusValue
from gitbroker.domain.ports.persistence import PersistenceError

from .locks import KeyedLocks
from .module import build_module
from .outcome import InstanceReport, Outcome, UnitOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from contextlib import AbstractContextManager
    from pathlib import Path

    from gitbroker.common.layout import RepositoryLayout
    from gitbroker.domain.model import Binding, ServiceInstance
    from gitbroker.domain.ports.execution import ModuleExecutor
    from gitbroker.domain.ports.persistence import ModuleWriter, StatusRecorder

log = getLogger(__name__)

BINDINGLESS_STATUS: Final = Status(
    StatusValue.SUCCEEDED,
    "Instance without binding processed successfully. No action executed.",
)
AWAITING_MANUAL_INPUT_STATUS: Final = Status(
    StatusValue.IN_PROGRESS,
    "Waiting for manual input from a platform operator!",
)
APPLIED_STATUS: Final = Status(StatusValue.SUCCEEDED, "Terraform applied successfully")
APPLY_FAILED_STATUS: Final = Status(StatusValue.FAILED, "Applying Terraform failed!")
PROCESSING_FAILED_STATUS: Final = Status(StatusValue.FAILED, "Processing the binding failed!")


@dataclass(slots=True)
class ReconciliationEngine:
    """Decide and execute the required action for every binding."""

    layout: RepositoryLayout
    recorder: StatusRecorder
    executor: ModuleExecutor
    write_module: ModuleWriter
    max_workers: int = 1
    # held around module write and apply; the store keeps upstream re-syncs out meanwhile
    working_tree_lease: Callable[[], AbstractContextManager[object]] = nullcontext
    _module_locks: KeyedLocks = field(default_factory=KeyedLocks, init=False, repr=False)

    def run(self, instances: Iterable[ServiceInstance]) -> list[InstanceReport]:
        """Reconcile ``instances`` and return one report per instance, in input order.

        ``PersistenceError`` aborts the pass; instances not yet started are dropped.
        """

        ordered = list(instances)
        if self.max_workers <= 1 or len(ordered) <= 1:
            return [self.reconcile_instance(instance) for instance in ordered]

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="reconcile"
        ) as pool:
            futures = [pool.submit(self.reconcile_instance, instance) for instance in ordered]
            try:
                return [future.result() for future in futures]
            except PersistenceError:
                for future in futures:
                    future.cancel()
                raise

    def reconcile_instance(self, instance: ServiceInstance) -> InstanceReport:
        if not instance.bindings:
            outcome = self._reconcile_bindingless(instance)
            return InstanceReport(instance.instance_id, (outcome,))

        outcomes = tuple(
            self._reconcile_binding(instance, binding) for binding in instance.bindings
        )
        return InstanceReport(instance.instance_id, outcomes)

    def _reconcile_bindingless(self, instance: ServiceInstance) -> UnitOutcome:
        instance_id = instance.instance_id
        if instance.status != BINDINGLESS_STATUS:
            try:
                self.recorder.record_instance(instance, BINDINGLESS_STATUS)
            except OSError:
                log.exception("%s: writing the instance status failed", instance_id)
                return UnitOutcome(instance_id, Outcome.FAILED)
        return UnitOutcome(instance_id, Outcome.SUCCEEDED)

    def _reconcile_binding(self, instance: ServiceInstance, binding: Binding) -> UnitOutcome:
        instance_id = instance.instance_id
        binding_id = binding.binding_id
        service_definition_id = instance.service_definition_id

        if instance.awaiting_manual_input:
            log.info(
                "%s/%s: plan %s waits for manual input", instance_id, binding_id, instance.plan_id
            )
            recorded = self._record_binding(instance, binding, AWAITING_MANUAL_INPUT_STATUS)
            outcome = Outcome.PENDING if recorded else Outcome.FAILED
            return UnitOutcome(instance_id, outcome, binding_id)

        if not self.layout.terraform_dir(service_definition_id).is_dir():
            log.info(
                "%s/%s: no module for service definition %s, skipping",
                instance_id,
                binding_id,
                service_definition_id,
            )
            return UnitOutcome(instance_id, Outcome.SKIPPED, binding_id)

        status, module_path = self._apply(instance, binding)
        attachments = (module_path,) if module_path is not None else ()
        recorded = self._record_binding(instance, binding, status, attachments=attachments)

        outcome = Outcome.SUCCESSFUL if recorded and status is APPLIED_STATUS else Outcome.FAILED
        return UnitOutcome(instance_id, outcome, binding_id)

    def _record_binding(
        self,
        instance: ServiceInstance,
        binding: Binding,
        status: Status,
        *,
        attachments: Sequence[Path] = (),
    ) -> bool:
        try:
            self.recorder.record_binding(instance, binding, status, attachments=attachments)
        except OSError:
            log.exception(
                "%s/%s: writing the binding status failed", instance.instance_id, binding.binding_id
            )
            return False
        return True

    def _apply(self, instance: ServiceInstance, binding: Binding) -> tuple[Status, Path | None]:
        instance_id = instance.instance_id
        binding_id = binding.binding_id
        service_definition_id = instance.service_definition_id
        module_path: Path | None = None
        try:
            module = build_module(
                instance, binding, source=self.layout.module_source(service_definition_id)
            )
            # no upstream re-sync may touch the tree between writing the module and the apply
            with self.working_tree_lease():
                module_path = self.write_module(
                    self.layout.module_file(instance_id, binding_id), module
                )
                # the tool keeps per-directory state; one run per service definition at a time
                with self._module_locks.hold(service_definition_id):
                    applied = self.executor.apply(self.layout.binding_dir(instance_id, binding_id))
        except Exception:  # noqa: BLE001
            log.exception("%s/%s: processing the binding failed", instance_id, binding_id)
            return PROCESSING_FAILED_STATUS, module_path

        if applied:
            log.info("%s/%s: terraform applied", instance_id, binding_id)
            return APPLIED_STATUS, module_path
        log.warning("%s/%s: terraform reported failure", instance_id, binding_id)
        return APPLY_FAILED_STATUS, module_path
