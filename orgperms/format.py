"""Rendering of permission records as JSON, CSV or a console table."""

import csv
import json
import sys
from collections.abc import Iterable
from typing import TextIO

from rich.console import Console
from rich.table import Table

from orgperms.exceptions import ConfigurationError
from orgperms.types.permissions import PermissionRecord, TeamPermission

FIELDS = (
    "repository",
    "handle",
    "permission",
    "organizationPermission",
    "teamPermission",
    "repositoryPermission",
)


def format_teams(teams: Iterable[TeamPermission] | None) -> str:
    """Render team permissions as ``name:PERMISSION`` pairs joined by ``;``."""
    if not teams:
        return ""
    return ";".join(f"{team.name}:{team.permission}" for team in teams)


def _row(record: PermissionRecord) -> list[str]:
    return [
        record.repository,
        record.handle,
        record.permission,
        record.organization_permission or "",
        format_teams(record.team_permissions),
        record.repository_permission or "",
    ]


def write_json(records: Iterable[PermissionRecord], stream: TextIO, indent: int = 0) -> None:
    stream.write(
        json.dumps([r.to_dict() for r in records], indent=indent or None)
    )
    stream.write("\n")


def write_csv(records: Iterable[PermissionRecord], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDS)
    for record in records:
        writer.writerow(_row(record))


def build_table(records: Iterable[PermissionRecord], title: str | None = None) -> Table:
    table = Table(title=title, show_lines=False)
    for field in FIELDS:
        table.add_column(field, overflow="fold")
    for record in records:
        table.add_row(*_row(record))
    return table


def write_table(
    records: Iterable[PermissionRecord],
    stream: TextIO,
    title: str | None = None,
) -> None:
    console = Console(file=stream)
    console.print(build_table(records, title))


def write_records(
    records: Iterable[PermissionRecord],
    output_format: str,
    indent: int = 0,
    stream: TextIO | None = None,
) -> None:
    """
    Write records to ``stream`` (default: stdout).

    Args:
        records: Records to render, in output order
        output_format: "json", "csv" or "table"
        indent: JSON indentation (0 for compact output)
        stream: Destination text stream

    Raises:
        ConfigurationError: On an unknown output format
    """
    out = stream if stream is not None else sys.stdout

    if output_format == "json":
        write_json(records, out, indent)
    elif output_format == "csv":
        write_csv(records, out)
    elif output_format == "table":
        write_table(records, out)
    else:
        raise ConfigurationError(f"Invalid output format: {output_format}")
