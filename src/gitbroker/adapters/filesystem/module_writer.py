"""Writes ``module.tf.json`` next to a binding."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .files import atomic_write_text

if TYPE_CHECKING:
    from pathlib import Path

    from gitbroker.domain.reconciliation.module import ReconciliationModule


def write_module(target: Path, module: ReconciliationModule) -> Path:
    return atomic_write_text(target, module.render())
