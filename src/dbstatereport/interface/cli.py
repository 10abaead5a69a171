"""
CLI main entry point.

    dbstatereport SQL01 SQL02\\HR
    dbstatereport SQL01 -d HR -d Accounting --format json
    type servers.txt | dbstatereport -x Scratch
    dbstatereport --targets-file config/sql_targets.json -o output/db_state.xlsx
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import SecretStr
from rich.console import Console
from rich.markup import escape

from dbstatereport import __version__
from dbstatereport.application.state_reporter import StateReporter
from dbstatereport.domain.config import Credential, SqlTarget
from dbstatereport.domain.errors import InstanceUnreachableError
from dbstatereport.infrastructure.config_loader import ConfigLoader
from dbstatereport.infrastructure.logging_config import setup_logging
from dbstatereport.interface.formatters import (
    OutputFormat,
    format_csv,
    format_json,
    render_table,
)


logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="dbstatereport",
    help="🗄️ Report read-only, status and user-access state of SQL Server databases",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"dbstatereport {__version__}")
        raise typer.Exit()


def read_piped_instances(stream) -> List[str]:
    """Instance names from piped input, one per line. Blank lines and # comments are skipped."""
    instances = []
    for line in stream:
        name = line.strip()
        if name and not name.startswith("#"):
            instances.append(name)
    return instances


def _resolve_credential(username: Optional[str], password: Optional[str]) -> Optional[Credential]:
    if not username:
        return None
    if password is None:
        password = typer.prompt(f"Password for {username}", hide_input=True)
    return Credential(username=username, password=SecretStr(password))


def _load_targets(targets_file: Path) -> List[SqlTarget]:
    targets = ConfigLoader(targets_file).load_sql_targets()
    for target in targets:
        # Fail before connecting anywhere if a SQL-auth target has no login
        target.credential()
    return targets


@app.command()
def report(
    instances: Optional[List[str]] = typer.Argument(
        None,
        help="SQL Server instances (HOST, HOST\\INSTANCE or HOST,PORT). Read from stdin when piped."
    ),
    targets_file: Optional[Path] = typer.Option(
        None,
        "--targets-file",
        "-t",
        help="JSON file listing target instances and their connection settings."
    ),
    username: Optional[str] = typer.Option(
        None,
        "--username",
        "-u",
        help="SQL login. Omit for Windows integrated authentication."
    ),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        "-p",
        help="SQL password. Prompted for when --username is given without it."
    ),
    database: Optional[List[str]] = typer.Option(
        None,
        "--database",
        "-d",
        help="Only report this database (repeatable)."
    ),
    exclude_database: Optional[List[str]] = typer.Option(
        None,
        "--exclude-database",
        "-x",
        help="Skip this database (repeatable)."
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format: table, json, csv"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the results to an Excel workbook (.xlsx)."
    ),
    connect_timeout: int = typer.Option(
        30,
        "--connect-timeout",
        min=1,
        help="Seconds to wait for each connection."
    ),
    enable_exception: bool = typer.Option(
        False,
        "--enable-exception",
        help="Stop at the first unreachable instance instead of warning and continuing."
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show progress and debug logging."
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Write a debug log to this file."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit."
    ),
):
    """
    Report per-database state flags for one or more SQL Server instances.

    System databases (master, model, msdb, tempdb, distribution) are never
    reported. Unreachable instances produce a warning and are skipped.
    """
    setup_logging(
        verbose=verbose,
        log_file=str(log_file) if log_file else None,
    )

    targets: List[SqlTarget] = []
    if targets_file:
        try:
            targets = _load_targets(targets_file)
        except (FileNotFoundError, PermissionError, ValueError) as e:
            logger.error("Failed to load targets: %s", e)
            err_console.print(f"❌ Error: {e}", style="red", markup=False, highlight=False)
            raise typer.Exit(1)

    instance_names = list(instances or [])
    if not instance_names and not targets and not sys.stdin.isatty():
        instance_names = read_piped_instances(sys.stdin)

    if not instance_names and not targets:
        err_console.print("[red]❌ No SQL Server instances given.[/red] Pass instance names, pipe them in, or use --targets-file.")
        raise typer.Exit(1)

    credential = _resolve_credential(username, password)

    reporter = StateReporter(connect_timeout=connect_timeout, enable_exception=enable_exception)
    records = []
    unreachable = []
    try:
        if instance_names:
            records.extend(reporter.report(
                instance_names, credential, include=database, exclude=exclude_database
            ))
            unreachable.extend(reporter.unreachable)
        if targets:
            records.extend(reporter.report_targets(
                targets, include=database, exclude=exclude_database
            ))
            unreachable.extend(reporter.unreachable)
    except InstanceUnreachableError as e:
        err_console.print(f"❌ {e}", style="red", markup=False, highlight=False)
        raise typer.Exit(1)

    if output_format == OutputFormat.JSON:
        typer.echo(format_json(records))
    elif output_format == OutputFormat.CSV:
        typer.echo(format_csv(records))
    else:
        render_table(records, console)

    if output:
        # Import here so openpyxl is only loaded when a workbook is requested
        from dbstatereport.infrastructure.excel_report import write_state_workbook
        path = write_state_workbook(records, output)
        err_console.print(f"[green]✅ Workbook saved:[/green] {escape(str(path))}")

    if unreachable:
        names = escape(", ".join(instance for instance, _ in unreachable))
        err_console.print(f"[yellow]⚠️ {len(unreachable)} instance(s) unreachable:[/yellow] {names}")


def main() -> int:
    """
    Main entry point for the dbstatereport console script.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    try:
        app()
        return 0
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
