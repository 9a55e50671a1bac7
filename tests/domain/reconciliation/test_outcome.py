from __future__ import annotations

from gitbroker.domain.reconciliation import InstanceReport, Outcome, UnitOutcome


def test_labels_name_the_unit() -> None:
    report = InstanceReport(
        "123",
        (
            UnitOutcome("123", Outcome.SKIPPED, "456"),
            UnitOutcome("123", Outcome.PENDING, "789"),
        ),
    )

    assert report.labels() == ["123/456: skipped", "123/789: pending"]


def test_binding_less_label() -> None:
    assert str(UnitOutcome("123", Outcome.SUCCEEDED)) == "123: succeeded"
