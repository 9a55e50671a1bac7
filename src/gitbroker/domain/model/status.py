"""Status records attached to instances and bindings."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import StatusValue


@dataclass(frozen=True, slots=True)
class Status:
    value: StatusValue
    description: str = ""

    def __post_init__(self) -> None:
        if self.value is StatusValue.EMPTY:
            raise ValueError("EMPTY marks a missing status and cannot be stored")


def status_value_of(status: Status | None) -> StatusValue:
    return StatusValue.EMPTY if status is None else status.value
