from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitbroker.adapters.filesystem import LocalRepositoryStore
from gitbroker.app import reconcile_repository
from gitbroker.config import ReconcileConfig, TerraformConfig
from gitbroker.domain.ports import PersistenceError, ProcessStartError, ProcessTimeoutError
from tests.support.repository import (
    BINDING_STATUS,
    INSTANCE_STATUS,
    MODULE_FILE,
    SERVICE_BINDING_ID,
    SERVICE_INSTANCE_ID,
    create_binding,
    create_instance,
    create_instance_and_binding,
    create_manual_params,
    create_terraform_folder,
    expected_module_content,
    write_status,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from gitbroker.app import ReconciliationReport
    from tests.support.processes import FakeRunner

    RunPass = Callable[..., ReconciliationReport]

UNIT = f"{SERVICE_INSTANCE_ID}/{SERVICE_BINDING_ID}"
APPLIED = "status: succeeded\ndescription: Terraform applied successfully\n"
APPLY_FAILED = "status: failed\ndescription: Applying Terraform failed!\n"
PROCESSING_FAILED = "status: failed\ndescription: Processing the binding failed!\n"
PENDING = "status: in progress\ndescription: Waiting for manual input from a platform operator!\n"


def _assert_statuses(root: Path, expected: str) -> None:
    assert (root / INSTANCE_STATUS).read_text() == expected
    assert (root / BINDING_STATUS).read_text() == expected


def test_empty_repository_yields_no_outcomes(run_pass: RunPass, fake_runner: FakeRunner) -> None:
    report = run_pass()

    assert report.labels() == []
    assert fake_runner.calls == []


def test_skips_binding_without_terraform_folder(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner, local_store: LocalRepositoryStore
) -> None:
    create_instance_and_binding(tmp_path)

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: skipped"]]
    assert not (tmp_path / INSTANCE_STATUS).exists()
    assert not (tmp_path / BINDING_STATUS).exists()
    assert not (tmp_path / MODULE_FILE).exists()
    assert fake_runner.calls == []
    assert local_store.commits == []


def test_skipped_binding_keeps_existing_status(tmp_path: Path, run_pass: RunPass) -> None:
    create_instance_and_binding(tmp_path)
    write_status(tmp_path / BINDING_STATUS, "failed", "Applying Terraform failed!")

    run_pass()

    assert (tmp_path / BINDING_STATUS).read_text() == APPLY_FAILED
    assert not (tmp_path / INSTANCE_STATUS).exists()


def test_instance_without_bindings_succeeds_without_execution(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance(tmp_path)

    report = run_pass()

    assert report.labels() == [[f"{SERVICE_INSTANCE_ID}: succeeded"]]
    assert (tmp_path / INSTANCE_STATUS).read_text() == (
        "status: succeeded\n"
        "description: Instance without binding processed successfully. No action executed.\n"
    )
    assert fake_runner.calls == []


def test_instance_without_bindings_is_not_rewritten(
    tmp_path: Path, run_pass: RunPass, local_store: LocalRepositoryStore
) -> None:
    create_instance(tmp_path)
    run_pass()
    assert len(local_store.commits) == 1

    report = run_pass()

    assert report.labels() == [[f"{SERVICE_INSTANCE_ID}: succeeded"]]
    assert len(local_store.commits) == 1


def test_successful_terraform_execution(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: successful"]]
    _assert_statuses(tmp_path, APPLIED)
    assert (tmp_path / MODULE_FILE).read_text() == expected_module_content()
    assert fake_runner.subcommands == ["init", "apply"]
    assert {call.cwd for call in fake_runner.calls} == {(tmp_path / MODULE_FILE).parent.resolve()}


def test_failed_terraform_execution(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)
    fake_runner.results = [1, 1]

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: failed"]]
    _assert_statuses(tmp_path, APPLY_FAILED)
    assert (tmp_path / MODULE_FILE).read_text() == expected_module_content()
    assert fake_runner.subcommands == ["init"]


def test_failed_apply_after_successful_init(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)
    fake_runner.results = [0, 2]

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: failed"]]
    _assert_statuses(tmp_path, APPLY_FAILED)
    assert fake_runner.subcommands == ["init", "apply"]


@pytest.mark.parametrize(
    "error",
    [
        ProcessStartError("failed!"),
        ProcessTimeoutError("terraform timed out"),
        RuntimeError("unexpected"),
    ],
)
def test_error_during_processing(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner, error: Exception
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)
    fake_runner.results = [error]

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: failed"]]
    _assert_statuses(tmp_path, PROCESSING_FAILED)
    assert (tmp_path / MODULE_FILE).read_text() == expected_module_content()


def test_pending_when_manual_input_is_missing(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path, manual_instance_input_needed=True)
    create_terraform_folder(tmp_path)

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: pending"]]
    _assert_statuses(tmp_path, PENDING)
    assert not (tmp_path / MODULE_FILE).exists()
    assert fake_runner.calls == []


def test_pending_without_terraform_folder(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path, manual_instance_input_needed=True)

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: pending"]]
    _assert_statuses(tmp_path, PENDING)
    assert not (tmp_path / MODULE_FILE).exists()
    assert fake_runner.calls == []


@pytest.mark.parametrize("content", ["status: EMPTY\n", "status: [\n"])
def test_invalid_status_file_does_not_stop_reconciliation(
    tmp_path: Path, run_pass: RunPass, content: str
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)
    (tmp_path / INSTANCE_STATUS).write_text(content)

    report = run_pass()

    assert report.labels() == [[f"{UNIT}: successful"]]
    assert report.errors == ()
    _assert_statuses(tmp_path, APPLIED)


def test_succeeds_once_manual_input_is_available(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path, manual_instance_input_needed=True)
    create_terraform_folder(tmp_path)
    assert run_pass().labels() == [[f"{UNIT}: pending"]]

    create_manual_params(tmp_path)
    report = run_pass()

    assert report.labels() == [[f"{UNIT}: successful"]]
    _assert_statuses(tmp_path, APPLIED)
    assert (tmp_path / MODULE_FILE).read_text() == expected_module_content(manualParam="test")
    assert fake_runner.subcommands == ["init", "apply"]


def test_every_pass_re_executes_terraform(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)

    run_pass()
    fake_runner.results = [0, 1]
    report = run_pass()

    assert report.labels() == [[f"{UNIT}: failed"]]
    assert fake_runner.subcommands == ["init", "apply", "init", "apply"]
    _assert_statuses(tmp_path, APPLY_FAILED)


def test_binding_event_is_committed_as_one_unit(
    tmp_path: Path, run_pass: RunPass, local_store: LocalRepositoryStore
) -> None:
    create_instance_and_binding(tmp_path)
    create_terraform_folder(tmp_path)

    run_pass()

    assert len(local_store.commits) == 1
    paths, message = local_store.commits[0]
    assert {local_store.relative(path) for path in paths} == {
        BINDING_STATUS,
        INSTANCE_STATUS,
        MODULE_FILE,
    }
    assert UNIT in message


def test_instance_status_reflects_last_binding_event(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_instance(tmp_path)
    create_binding(tmp_path, binding_id="a")
    create_binding(tmp_path, binding_id="b")
    create_terraform_folder(tmp_path)
    fake_runner.results = [0, 0, 1]

    report = run_pass()

    assert report.labels() == [
        [f"{SERVICE_INSTANCE_ID}/a: successful", f"{SERVICE_INSTANCE_ID}/b: failed"]
    ]
    assert (tmp_path / INSTANCE_STATUS).read_text() == APPLY_FAILED


def test_malformed_instance_is_excluded(
    tmp_path: Path, run_pass: RunPass
) -> None:
    create_instance(tmp_path, "ok")
    broken = tmp_path / "instances" / "broken"
    broken.mkdir(parents=True)
    (broken / "instance.yml").write_text("serviceInstanceId: [unclosed\n")

    report = run_pass()

    assert report.labels() == [["ok: succeeded"]]
    assert [error.instance_id for error in report.errors] == ["broken"]


def test_parallel_pass_keeps_catalog_order(
    tmp_path: Path, run_pass: RunPass, fake_runner: FakeRunner
) -> None:
    create_terraform_folder(tmp_path)
    for instance_id in ("a", "b", "c"):
        create_instance(tmp_path, instance_id)
        create_binding(tmp_path, instance_id, "x")

    report = run_pass(max_workers=3)

    assert report.labels() == [
        ["a/x: successful"],
        ["b/x: successful"],
        ["c/x: successful"],
    ]
    assert len(fake_runner.calls) == 6


class _RejectingStore(LocalRepositoryStore):
    def commit_and_push(self, changed_paths: Sequence[Path], message: str) -> None:
        raise PersistenceError("push rejected")


def test_persistence_failure_aborts_the_pass(tmp_path: Path, fake_runner: FakeRunner) -> None:
    create_instance(tmp_path, "a")
    create_instance(tmp_path, "b")

    with pytest.raises(PersistenceError):
        reconcile_repository(
            store=_RejectingStore(tmp_path),
            runner=fake_runner,
            terraform_config=TerraformConfig(),
            reconcile_config=ReconcileConfig(),
        )
