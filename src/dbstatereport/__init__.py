"""
DBStateReport - SQL Server database state reporter.

Reports READ_ONLY/READ_WRITE, ONLINE/OFFLINE/EMERGENCY and
SINGLE_USER/RESTRICTED_USER/MULTI_USER for every user database on one or
more SQL Server instances.

Usage:
    # CLI
    dbstatereport SQL01 SQL02\\HR --exclude-database Scratch

    # Programmatic
    from dbstatereport import get_database_state

    records = get_database_state(["SQL01"], include=["HR", "Accounting"])
"""

__version__ = "0.1.0"

from dbstatereport.application.state_reporter import StateReporter, get_database_state

__all__ = ["StateReporter", "get_database_state", "__version__"]
