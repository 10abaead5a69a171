"""
State Reporter - per-database state flags across SQL Server instances.

For each instance: connect, drop system databases, apply the include and
exclude lists, translate read-only / status / access into normalized labels,
and yield one StateRecord per surviving database.

An unreachable instance is logged as a warning and skipped; the remaining
instances are still processed.

Usage:
    reporter = StateReporter()
    for record in reporter.report(["SQL01", "SQL02\\HR"], exclude=["Scratch"]):
        print(record.database_name, record.status)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from dbstatereport.domain.config import Credential, SqlTarget
from dbstatereport.domain.errors import InstanceUnreachableError
from dbstatereport.domain.filters import filter_databases
from dbstatereport.domain.models import ServerHandle, StateRecord
from dbstatereport.domain.translation import (
    translate_access,
    translate_read_write,
    translate_status,
)


logger = logging.getLogger(__name__)

# connect(instance, credential, connect_timeout) -> ServerHandle
ConnectFn = Callable[[str, Optional[Credential], int], ServerHandle]


def _default_connect() -> ConnectFn:
    # Import here so pyodbc is only loaded when a real connection is needed
    from dbstatereport.infrastructure.sql_server import connect
    return connect


class StateReporter:
    """Report database state flags for a sequence of instances."""

    def __init__(
        self,
        connect: ConnectFn | None = None,
        connect_timeout: int = 30,
        enable_exception: bool = False,
    ):
        """
        Args:
            connect: Connection function; defaults to the pyodbc connector
            connect_timeout: Seconds to wait for each connection
            enable_exception: Raise InstanceUnreachableError instead of
                              warning and moving on
        """
        self._connect = connect or _default_connect()
        self.connect_timeout = connect_timeout
        self.enable_exception = enable_exception
        self.unreachable: List[Tuple[str, str]] = []

    def report(
        self,
        instances: Iterable[str],
        credential: Credential | None = None,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
    ) -> Iterator[StateRecord]:
        """
        Yield state records for every non-system database on each instance.

        Args:
            instances: Instance identifiers, processed in order
            credential: SQL login used for every instance (None = integrated)
            include: Only report these database names
            exclude: Never report these database names

        Yields:
            StateRecord per surviving database, in server order
        """
        self.unreachable = []
        for instance in instances:
            yield from self._report_instance(
                instance, credential, self.connect_timeout, include, exclude
            )

    def report_targets(
        self,
        targets: Iterable[SqlTarget],
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
    ) -> Iterator[StateRecord]:
        """
        Same as report(), using each target's own credential and timeout.

        Every target's credential is resolved before the first connection,
        so a SQL-auth target without a login raises ValueError before any
        record is yielded.
        """
        self.unreachable = []
        resolved = [(target, target.credential()) for target in targets]
        for target, credential in resolved:
            yield from self._report_instance(
                target.server_instance,
                credential,
                target.connect_timeout,
                include,
                exclude,
            )

    def _report_instance(
        self,
        instance: str,
        credential: Credential | None,
        connect_timeout: int,
        include: Sequence[str] | None,
        exclude: Sequence[str] | None,
    ) -> Iterator[StateRecord]:
        logger.info("Connecting to %s", instance)
        try:
            server = self._connect(instance, credential, connect_timeout)
        except InstanceUnreachableError as e:
            if self.enable_exception:
                raise
            logger.warning("%s", e)
            self.unreachable.append((instance, e.reason))
            return

        databases = filter_databases(server.databases, include=include, exclude=exclude)
        logger.info(
            "%s: reporting %d of %d databases",
            server.name, len(databases), len(server.databases),
        )

        for db in databases:
            yield StateRecord(
                computer_name=server.host_name,
                instance_name=server.service_name,
                sql_instance=server.name,
                database_name=db.name,
                read_write=translate_read_write(db.read_only),
                status=translate_status(db.status),
                access=translate_access(db.user_access),
            )


def get_database_state(
    instances: Iterable[str],
    credential: Credential | None = None,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
    enable_exception: bool = False,
    connect: ConnectFn | None = None,
) -> List[StateRecord]:
    """Collect state records for all instances into a list."""
    reporter = StateReporter(connect=connect, enable_exception=enable_exception)
    return list(reporter.report(instances, credential, include, exclude))
