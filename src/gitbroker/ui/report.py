"""Table and JSON rendering of catalog listings."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from gitbroker.domain.listing import instance_to_dict, table_headers, table_row

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitbroker.domain.listing import ListingProfile
    from gitbroker.domain.model import ServiceInstance

console = Console()


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Table:
    table = Table()
    for header in headers:
        table.add_column(header, style="cyan" if header == "id" else None, no_wrap=True)
    for row in rows:
        table.add_row(*row)
    return table


def render_json(instances: Sequence[ServiceInstance]) -> str:
    return json.dumps([instance_to_dict(instance) for instance in instances])


def print_listing(
    instances: Sequence[ServiceInstance],
    *,
    output_format: OutputFormat = OutputFormat.TEXT,
    profile: ListingProfile | None = None,
    target: Console | None = None,
) -> None:
    """Print instances as a table, or as JSON (profile is ignored for JSON)."""

    out = target or console
    if output_format is OutputFormat.JSON:
        out.out(render_json(instances), highlight=False)
        return
    rows = [table_row(instance, profile) for instance in instances]
    out.print(render_table(table_headers(profile), rows))
