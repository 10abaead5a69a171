"""Database name filtering."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from dbstatereport.domain.models import DatabaseInfo


SYSTEM_DATABASES = frozenset({"master", "model", "msdb", "tempdb", "distribution"})


def is_system_database(name: str) -> bool:
    return name in SYSTEM_DATABASES


def filter_databases(
    databases: Iterable[DatabaseInfo],
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> List[DatabaseInfo]:
    """
    Drop system databases, then apply the include and exclude lists.

    Name comparison is exact. Output keeps the input order.

    Args:
        databases: Databases in server order
        include: If non-empty, only these names are kept
        exclude: If non-empty, these names are dropped

    Returns:
        Surviving databases
    """
    result = [db for db in databases if not is_system_database(db.name)]

    if include:
        wanted = set(include)
        result = [db for db in result if db.name in wanted]

    if exclude:
        unwanted = set(exclude)
        result = [db for db in result if db.name not in unwanted]

    return result
