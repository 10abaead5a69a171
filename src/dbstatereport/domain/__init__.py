"""
Domain layer.

Pure models and rules: no I/O, no driver imports.
"""

from .config import AuthType, Credential, SqlTarget
from .errors import InstanceUnreachableError
from .filters import SYSTEM_DATABASES, filter_databases, is_system_database
from .models import DatabaseInfo, RECORD_FIELDS, RECORD_HEADERS, ServerHandle, StateRecord
from .translation import (
    AccessLabel,
    ReadWriteLabel,
    StatusLabel,
    translate_access,
    translate_read_write,
    translate_status,
)

__all__ = [
    "AccessLabel",
    "AuthType",
    "Credential",
    "DatabaseInfo",
    "InstanceUnreachableError",
    "RECORD_FIELDS",
    "RECORD_HEADERS",
    "ReadWriteLabel",
    "SYSTEM_DATABASES",
    "ServerHandle",
    "SqlTarget",
    "StateRecord",
    "StatusLabel",
    "filter_databases",
    "is_system_database",
    "translate_access",
    "translate_read_write",
    "translate_status",
]
