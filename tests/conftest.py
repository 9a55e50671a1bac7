from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from gitbroker.adapters.filesystem import LocalRepositoryStore
from gitbroker.app import ReconciliationReport, reconcile_repository
from gitbroker.config import ReconcileConfig, TerraformConfig
from tests.support.processes import FakeRunner

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

ENV_PREFIXES = ("GITBROKER_",)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith(ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def local_store(tmp_path: Path) -> LocalRepositoryStore:
    return LocalRepositoryStore(tmp_path)


@pytest.fixture
def run_pass(
    local_store: LocalRepositoryStore, fake_runner: FakeRunner
) -> Callable[..., ReconciliationReport]:
    def run(*, max_workers: int = 1) -> ReconciliationReport:
        return reconcile_repository(
            store=local_store,
            runner=fake_runner,
            terraform_config=TerraformConfig(timeout_seconds=60.0),
            reconcile_config=ReconcileConfig(max_workers=max_workers),
        )

    return run
