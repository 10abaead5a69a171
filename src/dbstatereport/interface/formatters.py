"""
Result formatters for state records.

Table output goes through rich; JSON and CSV are returned as plain strings
so they can be piped.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import List, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbstatereport.domain.models import RECORD_FIELDS, RECORD_HEADERS, StateRecord


class OutputFormat(str, Enum):
    """Supported stdout formats."""
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


STATUS_STYLES = {
    "ONLINE": "green",
    "OFFLINE": "red",
    "EMERGENCY": "bold red",
}


def _styled(value: str, styles: dict) -> str:
    style = styles.get(value)
    return f"[{style}]{value}[/{style}]" if style else escape(value)


def build_table(records: Sequence[StateRecord]) -> Table:
    """Build a rich Table with one row per record."""
    table = Table(title="Database State", header_style="bold cyan")
    for field in RECORD_FIELDS:
        table.add_column(RECORD_HEADERS[field], no_wrap=field == "database_name")

    for record in records:
        table.add_row(
            # Names come from the server and may contain [brackets]
            escape(record.computer_name),
            escape(record.instance_name),
            escape(record.sql_instance),
            escape(record.database_name),
            _styled(record.read_write, {"READ_ONLY": "yellow"}),
            _styled(record.status, STATUS_STYLES),
            _styled(record.access, {"SINGLE_USER": "yellow", "RESTRICTED_USER": "yellow"}),
        )
    return table


def render_table(records: Sequence[StateRecord], console: Console) -> None:
    if not records:
        console.print("[dim]No databases matched.[/dim]")
        return
    console.print(build_table(records))


def format_json(records: Sequence[StateRecord]) -> str:
    """Format records as a JSON array keyed by the display headers."""
    data: List[dict] = [
        {RECORD_HEADERS[field]: value for field, value in record.to_dict().items()}
        for record in records
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_csv(records: Sequence[StateRecord]) -> str:
    """Format records as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([RECORD_HEADERS[field] for field in RECORD_FIELDS])
    for record in records:
        data = record.to_dict()
        writer.writerow([data[field] for field in RECORD_FIELDS])
    return buffer.getvalue().rstrip("\n")
