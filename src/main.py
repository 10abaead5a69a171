"""
DBStateReport - SQL Server database state reporter.

Run from a source checkout without installing:
    python src/main.py SQL01 SQL02\\HR
"""

import sys
from dbstatereport.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
