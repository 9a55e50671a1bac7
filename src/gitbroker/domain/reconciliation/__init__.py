"""Reconciliation of repository state against real infrastructure.

Flow of one pass:
1) the store hands out a fresh snapshot of the working tree
2) the catalog parses it into instances and bindings
3) the engine decides per binding: skip, wait for manual input, or apply
4) the recorder writes the resulting status and commits it through the store
"""

from __future__ import annotations

from .engine import (
    APPLIED_STATUS,
    APPLY_FAILED_STATUS,
    AWAITING_MANUAL_INPUT_STATUS,
    BINDINGLESS_STATUS,
    PROCESSING_FAILED_STATUS,
    ReconciliationEngine,
)
from .locks import KeyedLocks
from .module import ReconciliationModule, build_module, merge_module_inputs
from .outcome import InstanceReport, Outcome, UnitOutcome

__all__ = [
    "APPLIED_STATUS",
    "APPLY_FAILED_STATUS",
    "AWAITING_MANUAL_INPUT_STATUS",
    "BINDINGLESS_STATUS",
    "PROCESSING_FAILED_STATUS",
    "InstanceReport",
    "KeyedLocks",
    "Outcome",
    "ReconciliationEngine",
    "ReconciliationModule",
    "UnitOutcome",
    "build_module",
    "merge_module_inputs",
]
