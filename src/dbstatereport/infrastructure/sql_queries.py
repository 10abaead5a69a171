"""
T-SQL used by the connector.

Both queries only touch catalog views and SERVERPROPERTY values that exist
from SQL Server 2008 R2 onward, so no version-specific variants are needed.
"""

# Instance identity.
# Note: CAST every SERVERPROPERTY to NVARCHAR to avoid ODBC sql_variant (-150) errors
SERVER_IDENTITY_QUERY = """
SELECT
    CAST(@@SERVERNAME AS NVARCHAR(256)) AS ServerName,
    CAST(@@SERVICENAME AS NVARCHAR(256)) AS ServiceName,
    CAST(COALESCE(
        SERVERPROPERTY('ComputerNamePhysicalNetBIOS'),
        SERVERPROPERTY('MachineName')
    ) AS NVARCHAR(256)) AS HostName
"""

# Database state columns. Ordered by name, matching how the server's
# management objects enumerate the database collection.
DATABASE_STATES_QUERY = """
SELECT
    d.name AS DatabaseName,
    CAST(d.is_read_only AS INT) AS IsReadOnly,
    CAST(d.user_access AS INT) AS UserAccess,
    CAST(d.state AS INT) AS State,
    CAST(d.is_in_standby AS INT) AS IsInStandby,
    CAST(d.is_auto_close_on AS INT) AS AutoClose,
    CAST(d.is_cleanly_shutdown AS INT) AS IsCleanlyShutdown
FROM sys.databases d
ORDER BY d.name
"""
