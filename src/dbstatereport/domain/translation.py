"""
Database state translation.

Normalizes the three server-reported values into the labels used by
ALTER DATABASE:
- user access mode  -> SINGLE_USER / RESTRICTED_USER / MULTI_USER
- read-only flag    -> READ_ONLY / READ_WRITE
- status flags      -> OFFLINE / ONLINE / EMERGENCY

Unknown inputs translate to an empty string rather than raising.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class AccessLabel(Enum):
    """Normalized user access labels."""
    SINGLE_USER = "SINGLE_USER"
    RESTRICTED_USER = "RESTRICTED_USER"
    MULTI_USER = "MULTI_USER"


class ReadWriteLabel(Enum):
    """Normalized updateability labels."""
    READ_ONLY = "READ_ONLY"
    READ_WRITE = "READ_WRITE"


class StatusLabel(Enum):
    """Normalized database status labels."""
    OFFLINE = "OFFLINE"
    ONLINE = "ONLINE"
    EMERGENCY = "EMERGENCY"


ACCESS_MAP: Dict[str, AccessLabel] = {
    "Single": AccessLabel.SINGLE_USER,
    "Restricted": AccessLabel.RESTRICTED_USER,
    "Multiple": AccessLabel.MULTI_USER,
}

# Checked in order, first match wins. "Offline" must come before "Normal"
# since a flag string can carry both.
STATUS_PATTERNS: Tuple[Tuple[str, StatusLabel], ...] = (
    ("Offline", StatusLabel.OFFLINE),
    ("Normal", StatusLabel.ONLINE),
    ("EmergencyMode", StatusLabel.EMERGENCY),
)


def translate_access(user_access: str | None) -> str:
    """Map an access mode name (Single/Restricted/Multiple) to its label."""
    label = ACCESS_MAP.get(user_access or "")
    return label.value if label else ""


def translate_read_write(read_only: bool) -> str:
    """Map the read-only flag to READ_ONLY / READ_WRITE."""
    if read_only:
        return ReadWriteLabel.READ_ONLY.value
    return ReadWriteLabel.READ_WRITE.value


def translate_status(status: str | None) -> str:
    """
    Map a status flag string to OFFLINE / ONLINE / EMERGENCY.

    Args:
        status: Raw status, e.g. "Normal", "Offline, AutoClosed"

    Returns:
        Label of the first matching pattern, or "" when nothing matches
    """
    if not status:
        return ""
    for pattern, label in STATUS_PATTERNS:
        if pattern in status:
            return label.value
    return ""
