"""Per-unit results of one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Outcome(StrEnum):
    SUCCEEDED = "succeeded"  # binding-less instance, nothing to execute
    SUCCESSFUL = "successful"  # tool applied the module
    SKIPPED = "skipped"
    PENDING = "pending"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class UnitOutcome:
    instance_id: str
    outcome: Outcome
    binding_id: str | None = None

    @property
    def unit(self) -> str:
        if self.binding_id is None:
            return self.instance_id
        return f"{self.instance_id}/{self.binding_id}"

    @property
    def label(self) -> str:
        return f"{self.unit}: {self.outcome}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class InstanceReport:
    instance_id: str
    outcomes: tuple[UnitOutcome, ...] = ()

    def labels(self) -> list[str]:
        return [outcome.label for outcome in self.outcomes]
