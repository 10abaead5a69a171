"""
Configuration loader module.

Loads sql_targets.json: the list of SQL Server instances to report on,
with their connection settings.

Example file:

    {
      "targets": [
        {"id": "prod1", "server": "SQLPROD01", "instance": "HR"},
        {"id": "prod2", "server": "10.0.0.12", "port": 1533, "auth": "sql",
         "credential_file": "credentials/prod2.json"}
      ]
    }
"""

import json
import logging
from pathlib import Path
from typing import List

from pydantic import SecretStr, ValidationError

from dbstatereport.domain.config import SqlTarget


logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load and validate the targets file."""

    def __init__(self, targets_file: str | Path):
        """
        Initialize config loader.

        Args:
            targets_file: Path to sql_targets.json. Relative credential_file
                          entries are resolved against this file's directory.
        """
        self.targets_file = Path(targets_file)
        self.config_dir = self.targets_file.parent
        logger.debug("ConfigLoader initialized with file: %s", self.targets_file)

    def _load_json_file(self, filepath: Path, required: bool = True) -> dict | None:
        """
        Load and parse a JSON file with clear error messages.

        Args:
            filepath: Path to JSON file
            required: If True, raises on a missing file. If False, returns None.

        Returns:
            Parsed JSON as dict, or None if optional file not found

        Raises:
            FileNotFoundError: If required file doesn't exist
            ValueError: If JSON is malformed or empty
            PermissionError: If file cannot be read
        """
        if not filepath.exists():
            if required:
                raise FileNotFoundError(
                    f"Configuration file not found: {filepath}\n"
                    f"Hint: Pass --targets-file with the path to your sql_targets.json."
                )
            logger.debug("Optional config not found: %s", filepath)
            return None

        try:
            content = filepath.read_text(encoding="utf-8")
        except PermissionError as e:
            raise PermissionError(
                f"Cannot read config file (permission denied): {filepath}\n"
                f"Hint: Check file permissions or if another process has it locked."
            ) from e

        if not content.strip():
            raise ValueError(
                f"Configuration file is empty: {filepath}\n"
                f"Hint: Add a JSON object with a \"targets\" list."
            )

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in config file: {filepath}\n"
                f"Error at line {e.lineno}, column {e.colno}: {e.msg}\n"
                f"Hint: Validate JSON syntax. Note: .json files cannot have comments."
            ) from e

    def _load_credential_file(self, filepath: str) -> dict:
        """
        Load credentials from a JSON file.

        Args:
            filepath: Path to credential file (relative to the targets file or absolute)

        Returns:
            Dictionary with 'username' and 'password' keys
        """
        path = Path(filepath)
        if not path.is_absolute():
            path = self.config_dir / filepath

        logger.debug("Loading credentials from: %s", path)
        data = self._load_json_file(path, required=False)

        if data is None:
            logger.warning("Credential file not found: %s", filepath)
            return {}

        return {
            "username": data.get("username"),
            "password": data.get("password"),
        }

    def load_sql_targets(self, include_disabled: bool = False) -> List[SqlTarget]:
        """
        Load SQL Server target configurations.

        Args:
            include_disabled: Also return targets with "enabled": false

        Returns:
            List of SqlTarget objects in file order

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        logger.info("Loading SQL targets from: %s", self.targets_file)

        data = self._load_json_file(self.targets_file, required=True)
        if not isinstance(data, dict) or not isinstance(data.get("targets"), list):
            raise ValueError(
                f"Config file {self.targets_file} has no \"targets\" list\n"
                f"Hint: Expected {{\"targets\": [{{\"id\": ..., \"server\": ...}}]}}"
            )

        targets = []
        for index, item in enumerate(data["targets"]):
            try:
                target = SqlTarget.model_validate(item)
            except ValidationError as e:
                raise ValueError(
                    f"Invalid target #{index + 1} in {self.targets_file}:\n{e}"
                ) from e

            if target.credential_file and target.password is None:
                creds = self._load_credential_file(target.credential_file)
                update = {"username": creds.get("username") or target.username}
                if creds.get("password") is not None:
                    update["password"] = SecretStr(creds["password"])
                target = target.model_copy(update=update)

            if not target.enabled and not include_disabled:
                logger.debug("Skipping disabled target: %s", target.display_name)
                continue

            targets.append(target)
            logger.debug("Loaded target: %s", target.display_name)

        logger.info("Loaded %d SQL Server targets", len(targets))
        return targets
