"""
Tests for the dbstatereport command line.

The default pyodbc connector is replaced with FakeConnect.
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from dbstatereport import __version__
from dbstatereport.application import state_reporter
from dbstatereport.interface import cli
from dbstatereport.interface.cli import app, read_piped_instances

from tests.fakes import FakeConnect, db, make_server


runner = CliRunner()


@pytest.fixture(autouse=True)
def patched_connect(monkeypatch, fake_connect):
    monkeypatch.setattr(state_reporter, "_default_connect", lambda: fake_connect)
    return fake_connect


def json_output(result):
    return json.loads(result.stdout)


class TestReportCommand:

    def test_json_output(self):
        result = runner.invoke(app, ["SQL01", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json_output(result)
        assert [row["DatabaseName"] for row in data] == ["Accounting", "HR", "Sales"]
        assert data[1]["RW"] == "READ_ONLY"
        assert data[1]["Status"] == "OFFLINE"
        assert data[1]["Access"] == "SINGLE_USER"

    def test_include_and_exclude_options(self):
        result = runner.invoke(app, ["SQL01", "-d", "HR", "-d", "Accounting", "-x", "Accounting", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert [row["DatabaseName"] for row in json_output(result)] == ["HR"]

    def test_include_system_database_is_ignored(self):
        result = runner.invoke(app, ["SQL01", "-d", "master", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert json_output(result) == []

    def test_csv_output(self):
        result = runner.invoke(app, ["SQL02\\HR", "--format", "CSV"])

        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0].startswith("ComputerName,InstanceName,SqlInstance")
        assert lines[1] == "SQL02,HR,SQL02\\HR,Payroll,READ_WRITE,ONLINE,MULTI_USER"

    def test_table_output(self, monkeypatch):
        monkeypatch.setattr(cli, "console", Console(width=200))
        result = runner.invoke(app, ["SQL01"])

        assert result.exit_code == 0, result.output
        assert "Database State" in result.stdout
        assert "HR" in result.stdout

    def test_table_output_with_bracketed_database_name(self, monkeypatch):
        fleet = FakeConnect({"SQL01": make_server("SQL01", db("Archive[/2019]"), db("[bold]Payroll"))})
        monkeypatch.setattr(state_reporter, "_default_connect", lambda: fleet)
        monkeypatch.setattr(cli, "console", Console(width=200))

        result = runner.invoke(app, ["SQL01"])

        assert result.exit_code == 0, result.output
        assert "Archive[/2019]" in result.stdout
        assert "[bold]Payroll" in result.stdout

    def test_unreachable_instance_warns_and_continues(self, patched_connect):
        result = runner.invoke(app, ["DOWN01", "SQL01", "--format", "csv"])

        assert result.exit_code == 0, result.output
        assert [c[0] for c in patched_connect.calls] == ["DOWN01", "SQL01"]
        assert "SQL01,MSSQLSERVER,SQL01,Accounting" in result.output
        assert "1 instance(s) unreachable" in result.output

    def test_enable_exception_stops(self, patched_connect):
        result = runner.invoke(app, ["DOWN01", "SQL01", "--enable-exception"])

        assert result.exit_code == 1
        assert "Failure connecting to DOWN01" in result.output
        assert [c[0] for c in patched_connect.calls] == ["DOWN01"]

    def test_piped_instances(self, patched_connect):
        piped = "SQL01\n\n# decommissioned\nDOWN01\nSQL02\\HR\n"
        result = runner.invoke(app, ["--format", "csv"], input=piped)

        assert result.exit_code == 0, result.output
        assert [c[0] for c in patched_connect.calls] == ["SQL01", "DOWN01", "SQL02\\HR"]
        assert "SQL01,MSSQLSERVER,SQL01,HR,READ_ONLY,OFFLINE,SINGLE_USER" in result.output
        assert "SQL02,HR,SQL02\\HR,Payroll" in result.output

    def test_no_instances(self):
        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "No SQL Server instances given" in result.output

    def test_password_prompt(self, patched_connect):
        result = runner.invoke(app, ["SQL01", "-u", "auditor", "-f", "json"], input="s3cret\n")

        assert result.exit_code == 0, result.output
        _, credential, _ = patched_connect.calls[0]
        assert credential.username == "auditor"
        assert credential.get_password() == "s3cret"

    def test_connect_timeout_option(self, patched_connect):
        result = runner.invoke(app, ["SQL01", "-u", "sa", "-p", "pw", "--connect-timeout", "5", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert patched_connect.calls[0][2] == 5

    def test_workbook_output(self, tmp_path):
        path = tmp_path / "reports" / "state.xlsx"
        result = runner.invoke(app, ["SQL01", "-f", "json", "-o", str(path)])

        assert result.exit_code == 0, result.output
        assert path.exists()
        assert "Workbook saved" in result.output

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        result = runner.invoke(app, ["DOWN01", "-f", "json", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        content = log_file.read_text(encoding="utf-8")
        assert "Connecting to DOWN01" in content
        assert "Failure connecting to DOWN01" in content

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestTargetsFile:

    def test_targets_file(self, tmp_path, patched_connect):
        path = tmp_path / "sql_targets.json"
        path.write_text(json.dumps({"targets": [
            {"id": "a", "server": "SQL01", "connect_timeout": 12},
            {"id": "b", "server": "SQL02", "instance": "HR", "enabled": False},
        ]}), encoding="utf-8")

        result = runner.invoke(app, ["--targets-file", str(path), "-f", "json"])

        assert result.exit_code == 0, result.output
        assert patched_connect.calls == [("SQL01", None, 12)]
        assert len(json_output(result)) == 3

    def test_missing_targets_file(self, tmp_path):
        result = runner.invoke(app, ["--targets-file", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_sql_target_without_login(self, tmp_path):
        path = tmp_path / "sql_targets.json"
        path.write_text(json.dumps({"targets": [{"id": "a", "server": "SQL01", "auth": "sql"}]}), encoding="utf-8")

        result = runner.invoke(app, ["--targets-file", str(path)])

        assert result.exit_code == 1
        assert "no username/password" in result.output

    def test_instances_and_targets_file_together(self, tmp_path, patched_connect):
        path = tmp_path / "sql_targets.json"
        path.write_text(json.dumps({"targets": [
            {"id": "a", "server": "DOWN02"},
            {"id": "b", "server": "SQL02", "instance": "HR", "connect_timeout": 7},
        ]}), encoding="utf-8")

        result = runner.invoke(app, ["DOWN01", "SQL01", "--targets-file", str(path), "-f", "csv"])

        assert result.exit_code == 0, result.output
        assert [c[0] for c in patched_connect.calls] == ["DOWN01", "SQL01", "DOWN02", "SQL02\\HR"]
        assert patched_connect.calls[3][2] == 7
        assert "SQL01,MSSQLSERVER,SQL01,Accounting" in result.output
        assert "SQL02,HR,SQL02\\HR,Payroll" in result.output
        assert "2 instance(s) unreachable" in result.output
        assert "DOWN01, DOWN02" in result.output


def test_read_piped_instances():
    assert read_piped_instances(["SQL01\n", "  \n", "#x\n", " SQL02\\HR \n"]) == ["SQL01", "SQL02\\HR"]
