"""
Tests for the sql_targets.json loader.
"""

import json

import pytest

from dbstatereport.domain.config import AuthType
from dbstatereport.infrastructure.config_loader import ConfigLoader


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def targets_file(tmp_path):
    (tmp_path / "credentials").mkdir()
    write_json(tmp_path / "credentials" / "prod2.json", {"username": "auditor", "password": "s3cret"})
    return write_json(tmp_path / "sql_targets.json", {
        "targets": [
            {"id": "prod1", "server": "SQLPROD01", "instance": "HR"},
            {"id": "prod2", "server": "10.0.0.12", "port": 1533, "auth": "sql",
             "credential_file": "credentials/prod2.json"},
            {"id": "old", "server": "SQLOLD", "enabled": False},
        ]
    })


class TestLoadSqlTargets:

    def test_loads_enabled_targets_in_order(self, targets_file):
        targets = ConfigLoader(targets_file).load_sql_targets()

        assert [t.id for t in targets] == ["prod1", "prod2"]
        assert targets[0].server_instance == "SQLPROD01\\HR"
        assert targets[0].auth_type == AuthType.WINDOWS
        assert targets[1].server_instance == "10.0.0.12,1533"

    def test_include_disabled(self, targets_file):
        targets = ConfigLoader(targets_file).load_sql_targets(include_disabled=True)
        assert [t.id for t in targets] == ["prod1", "prod2", "old"]

    def test_credential_file_resolved_relative_to_targets_file(self, targets_file):
        prod2 = ConfigLoader(targets_file).load_sql_targets()[1]
        credential = prod2.credential()

        assert credential.username == "auditor"
        assert credential.get_password() == "s3cret"

    def test_missing_credential_file_leaves_target_without_password(self, tmp_path):
        path = write_json(tmp_path / "sql_targets.json", {"targets": [
            {"id": "x", "server": "SQL01", "auth": "sql", "username": "sa", "credential_file": "nope.json"}
        ]})
        [target] = ConfigLoader(path).load_sql_targets()

        assert target.password is None
        with pytest.raises(ValueError, match="no username/password"):
            target.credential()


class TestConfigErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            ConfigLoader(tmp_path / "sql_targets.json").load_sql_targets()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "sql_targets.json"
        path.write_text("   ", encoding="utf-8")
        with pytest.raises(ValueError, match="empty"):
            ConfigLoader(path).load_sql_targets()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "sql_targets.json"
        path.write_text('{"targets": [', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            ConfigLoader(path).load_sql_targets()

    def test_missing_targets_list(self, tmp_path):
        path = write_json(tmp_path / "sql_targets.json", {"servers": []})
        with pytest.raises(ValueError, match="no \"targets\" list"):
            ConfigLoader(path).load_sql_targets()

    def test_invalid_target_entry(self, tmp_path):
        path = write_json(tmp_path / "sql_targets.json", {"targets": [{"id": "x", "server": ""}]})
        with pytest.raises(ValueError, match="Invalid target #1"):
            ConfigLoader(path).load_sql_targets()
