"""
SQL Server connection and database state retrieval.

Handles:
- Connection string building
- ODBC driver detection and fallback
- Reading instance identity and the sys.databases state columns
- Translating catalog codes into the server management object enumeration
  names (Single/Restricted/Multiple, Normal/Offline/EmergencyMode/...)
"""

import logging
from typing import Any, Optional

import pyodbc

from dbstatereport.domain.config import Credential
from dbstatereport.domain.errors import InstanceUnreachableError
from dbstatereport.domain.models import DatabaseInfo, ServerHandle
from dbstatereport.infrastructure.sql_queries import (
    DATABASE_STATES_QUERY,
    SERVER_IDENTITY_QUERY,
)


logger = logging.getLogger(__name__)


# sys.databases.user_access
USER_ACCESS_NAMES = {
    0: "Multiple",
    1: "Single",
    2: "Restricted",
}

# sys.databases.state
STATE_NAMES = {
    0: "Normal",            # ONLINE
    1: "Restoring",         # RESTORING
    2: "Recovering",        # RECOVERING
    3: "RecoveryPending",   # RECOVERY_PENDING
    4: "Suspect",           # SUSPECT
    5: "EmergencyMode",     # EMERGENCY
    6: "Offline",           # OFFLINE
    7: "Inaccessible",      # COPYING (Azure)
    10: "Offline",          # OFFLINE_SECONDARY (Azure geo-replica)
}


def user_access_name(code: Optional[int]) -> str:
    """Enumeration name for a sys.databases.user_access code ("" if unknown)."""
    if code is None:
        return ""
    return USER_ACCESS_NAMES.get(int(code), "")


def status_flags(
    state: Optional[int],
    is_in_standby: bool = False,
    auto_close: bool = False,
    is_cleanly_shutdown: bool = False,
) -> str:
    """
    Build the comma-joined status flag string for a database.

    Examples:
        status_flags(0) -> "Normal"
        status_flags(0, auto_close=True, is_cleanly_shutdown=True) -> "Normal, AutoClosed"
        status_flags(1, is_in_standby=True) -> "Restoring, Standby"
    """
    flags = []
    if state is not None and int(state) in STATE_NAMES:
        flags.append(STATE_NAMES[int(state)])
    if is_in_standby:
        flags.append("Standby")
    if auto_close and is_cleanly_shutdown:
        flags.append("AutoClosed")
    return ", ".join(flags)


def _escape_odbc_value(value: str) -> str:
    """Brace-quote a connection string value so ';' and '}' are safe."""
    return "{" + value.replace("}", "}}") + "}"


class SqlConnector:
    """
    SQL Server connection manager.

    Opens a short-lived connection per call; nothing is pooled between
    instances.
    """

    def __init__(
        self,
        server_instance: str,
        credential: Credential | None = None,
        connect_timeout: int = 30,
    ):
        """
        Initialize SQL connector.

        Args:
            server_instance: Server instance string (e.g., "SERVER\\INSTANCE" or "SERVER,PORT")
            credential: SQL login; None uses Windows integrated authentication
            connect_timeout: Connection timeout in seconds
        """
        self.server_instance = server_instance
        self.credential = credential
        self.connect_timeout = connect_timeout
        self._connection_string: str | None = None

        logger.debug(
            "SqlConnector initialized for %s (auth=%s)",
            server_instance, "sql" if credential else "integrated",
        )

    def _detect_odbc_driver(self) -> str:
        """
        Detect best available ODBC driver.

        Returns:
            ODBC driver name

        Raises:
            RuntimeError: If no suitable driver found
        """
        drivers = pyodbc.drivers()
        logger.debug("Available ODBC drivers: %s", drivers)

        # Preferred drivers (newest first)
        preferred = [
            "ODBC Driver 18 for SQL Server",
            "ODBC Driver 17 for SQL Server",
            "ODBC Driver 13 for SQL Server",
            "ODBC Driver 11 for SQL Server",
        ]

        for driver in preferred:
            if driver in drivers:
                logger.debug("Using ODBC driver: %s", driver)
                return driver

        fallback = [
            "SQL Server Native Client 11.0",
            "SQL Server Native Client 10.0",
            "SQL Server",
        ]

        for driver in fallback:
            if driver in drivers:
                logger.warning("Using fallback ODBC driver: %s", driver)
                return driver

        raise RuntimeError("No SQL Server ODBC driver found. Please install ODBC Driver 17 or 18.")

    def build_connection_string(self) -> str:
        """
        Build ODBC connection string.

        Returns:
            Connection string
        """
        if self._connection_string:
            return self._connection_string

        driver = self._detect_odbc_driver()

        parts = [
            f"DRIVER={{{driver}}}",
            f"SERVER={self.server_instance}",
            "DATABASE=master",
            "APP=dbstatereport",
            "Encrypt=no",
            "TrustServerCertificate=yes",
        ]

        if self.credential is None:
            parts.append("Trusted_Connection=yes")
        else:
            parts.append(f"UID={_escape_odbc_value(self.credential.username)}")
            parts.append(f"PWD={_escape_odbc_value(self.credential.get_password())}")

        self._connection_string = ";".join(parts)
        logger.debug("Connection string built (credentials masked)")
        return self._connection_string

    def _open(self) -> "pyodbc.Connection":
        return pyodbc.connect(
            self.build_connection_string(),
            timeout=self.connect_timeout,
            readonly=True,
        )

    def get_server_handle(self) -> ServerHandle:
        """
        Read instance identity and the full database collection.

        Both queries run on one connection that is closed before returning.

        Returns:
            ServerHandle with databases in server order

        Raises:
            pyodbc.Error: If connection or query fails
            RuntimeError: If no ODBC driver is installed
        """
        conn = self._open()
        try:
            cursor = conn.cursor()

            cursor.execute(SERVER_IDENTITY_QUERY)
            identity = cursor.fetchone()

            cursor.execute(DATABASE_STATES_QUERY)
            rows = cursor.fetchall()
        finally:
            conn.close()

        databases = [self._row_to_database(row) for row in rows]

        handle = ServerHandle(
            name=identity.ServerName or self.server_instance,
            service_name=identity.ServiceName or "",
            host_name=identity.HostName or "",
            databases=databases,
        )
        logger.debug(
            "%s: %d databases (host=%s, service=%s)",
            handle.name, len(databases), handle.host_name, handle.service_name,
        )
        return handle

    @staticmethod
    def _row_to_database(row: Any) -> DatabaseInfo:
        return DatabaseInfo(
            name=row.DatabaseName,
            read_only=bool(row.IsReadOnly),
            user_access=user_access_name(row.UserAccess),
            status=status_flags(
                row.State,
                is_in_standby=bool(row.IsInStandby),
                auto_close=bool(row.AutoClose),
                is_cleanly_shutdown=bool(row.IsCleanlyShutdown),
            ),
        )


def connect(
    instance: str,
    credential: Credential | None = None,
    connect_timeout: int = 30,
) -> ServerHandle:
    """
    Connect to an instance and return its identity and databases.

    Raises:
        InstanceUnreachableError: On any driver or connection failure
    """
    connector = SqlConnector(instance, credential=credential, connect_timeout=connect_timeout)
    try:
        return connector.get_server_handle()
    except (pyodbc.Error, RuntimeError) as e:
        raise InstanceUnreachableError(instance, str(e)) from e
