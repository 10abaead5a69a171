"""
Infrastructure layer.

pyodbc connectivity, config files, logging and Excel export. The connector
is not imported here so the rest of the package works without an ODBC
driver manager installed.
"""
