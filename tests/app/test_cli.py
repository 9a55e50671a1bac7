from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

import pytest

from gitbroker.app import ReconciliationReport
from gitbroker.config import ConfigurationError, ReconcileConfig
from gitbroker.domain.listing import InstanceFilter
from gitbroker.domain.model import StatusValue
from gitbroker.domain.ports import PersistenceError
from gitbroker.domain.reconciliation import InstanceReport, Outcome, UnitOutcome
from gitbroker.ui import cli as cli_module
from tests.support.repository import create_instance, write_status

if TYPE_CHECKING:
    from pathlib import Path


def _report() -> ReconciliationReport:
    return ReconciliationReport(
        instances=(
            InstanceReport("1", (UnitOutcome("1", Outcome.SUCCEEDED),)),
            InstanceReport("2", (UnitOutcome("2", Outcome.SKIPPED, "b"),)),
        )
    )


def test_reconcile_prints_outcome_labels(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_reconcile(**kwargs: object) -> ReconciliationReport:
        captured.update(kwargs)
        return _report()

    monkeypatch.setattr(cli_module, "reconcile_repository", fake_reconcile)

    cli_module.main(["reconcile", str(tmp_path), "--local", "--workers", "3"])

    assert capsys.readouterr().out.splitlines() == ["1: succeeded", "2/b: skipped"]
    assert captured["use_git"] is False
    assert captured["reconcile_config"] == ReconcileConfig(max_workers=3)
    repository_config = captured["repository_config"]
    assert repository_config.path == tmp_path  # type: ignore[attr-defined]


def test_reconcile_defaults_to_git(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_reconcile(**kwargs: object) -> ReconciliationReport:
        captured.update(kwargs)
        return ReconciliationReport()

    monkeypatch.setattr(cli_module, "reconcile_repository", fake_reconcile)

    cli_module.main(["reconcile"])

    assert captured["use_git"] is True
    assert captured["reconcile_config"] == ReconcileConfig(max_workers=1)


def test_invalid_worker_count_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "reconcile_repository", lambda **_: _report())

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile", "--workers", "0"])

    assert excinfo.value.code == 2


def test_configuration_error_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reconcile(**_: object) -> ReconciliationReport:
        raise ConfigurationError("GITBROKER_MAX_WORKERS must be an integer")

    monkeypatch.setattr(cli_module, "reconcile_repository", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile"])

    assert excinfo.value.code == 2


def test_persistence_error_exits_with_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reconcile(**_: object) -> ReconciliationReport:
        raise PersistenceError("push rejected")

    monkeypatch.setattr(cli_module, "reconcile_repository", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile"])

    assert excinfo.value.code == 1


def test_list_passes_filter(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_list(path: object, *, instance_filter: InstanceFilter) -> list[object]:
        captured["path"] = path
        captured["filter"] = instance_filter
        return []

    monkeypatch.setattr(cli_module, "list_instances", fake_list)

    cli_module.main(["list", "repo", "--status", "EMPTY", "--deleted", "false"])

    assert captured["path"] == "repo"
    assert captured["filter"] == InstanceFilter(status=StatusValue.EMPTY, deleted=False)


def _table_rows(output: str) -> list[list[str]]:
    rows = []
    for line in output.splitlines():
        cells = re.split(r"[┃│|]", line)
        if len(cells) > 2:
            rows.append([cell.strip() for cell in cells[1:-1]])
    return rows


def test_list_renders_table_from_working_tree(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    create_instance(tmp_path, "a")
    create_instance(tmp_path, "b", deleted=True)
    write_status(tmp_path / "instances" / "b" / "status.yml", "failed", "nope")

    cli_module.main(["list", str(tmp_path), "-p", "meshmarketplace"])

    assert _table_rows(capsys.readouterr().out) == [
        ["id", "customer", "project", "service", "plan", "status", "deleted"],
        ["a", "my-customer", "my-project", "my-service", "small", "", ""],
        ["b", "my-customer", "my-project", "my-service", "small", "failed", "true"],
    ]


def test_list_deleted_filter_excludes_instances_without_flag(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    create_instance(tmp_path, "a")
    create_instance(tmp_path, "b", deleted=False)

    cli_module.main(["list", str(tmp_path), "--deleted", "false"])

    rows = _table_rows(capsys.readouterr().out)
    assert [row[0] for row in rows] == ["id", "b"]


def test_list_renders_json(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    create_instance(tmp_path, "a", deleted=False)

    cli_module.main(["list", str(tmp_path), "-o", "json", "--deleted", "false"])

    payload = json.loads(capsys.readouterr().out)
    assert [item["instance"]["serviceInstanceId"] for item in payload] == ["a"]
    assert payload[0]["status"] is None
    assert payload[0]["servicePlan"] == {"id": "plan456", "name": "small"}
