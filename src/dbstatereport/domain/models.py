"""
Database state domain models.

Plain dataclasses describing what the connector reads from an instance
(ServerHandle / DatabaseInfo) and what the reporter emits (StateRecord).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class DatabaseInfo:
    """
    Database properties as reported by the server.

    Attributes:
        name: Database name
        read_only: True when the database rejects writes
        user_access: Access mode enumeration name (Single/Restricted/Multiple)
        status: Comma-joined status flags (e.g. "Normal, AutoClosed")
    """
    name: str
    read_only: bool
    user_access: str
    status: str


@dataclass
class ServerHandle:
    """SQL Server instance identity and its database collection."""
    name: str
    service_name: str
    host_name: str
    databases: List[DatabaseInfo] = field(default_factory=list)


@dataclass(frozen=True)
class StateRecord:
    """One reported database state row."""
    computer_name: str
    instance_name: str
    sql_instance: str
    database_name: str
    read_write: str
    status: str
    access: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Column order used by every output format
RECORD_FIELDS = (
    "computer_name",
    "instance_name",
    "sql_instance",
    "database_name",
    "read_write",
    "status",
    "access",
)

RECORD_HEADERS = {
    "computer_name": "ComputerName",
    "instance_name": "InstanceName",
    "sql_instance": "SqlInstance",
    "database_name": "DatabaseName",
    "read_write": "RW",
    "status": "Status",
    "access": "Access",
}
