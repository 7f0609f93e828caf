"""
TRUNCATE_TABLE operation with DELETE fallback.

Native TRUNCATE is attempted first. When the database rejects it (foreign
keys, missing privilege, no TRUNCATE in the dialect) the table is emptied
with DELETE instead and the operation carries on.
"""

import logging
from contextlib import closing
from typing import Any

from prometheus_client import Counter

from src.dataset.model import Table
from src.operation.delete import DeleteAllOperation
from src.operation.base import TableOperation
from src.utils.database_types import DatabaseType
from src.utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)

TRUNCATE_FALLBACKS = get_or_create_metric(
    lambda: Counter(
        "dbfixture_truncate_fallbacks_total",
        "TRUNCATE statements rejected and replaced by DELETE",
        ["table"],
    ),
    "dbfixture_truncate_fallbacks_total",
)

SAVEPOINT_NAME = "dbfixture_truncate"


class TruncateOperation(TableOperation):
    """Empties each table, by TRUNCATE where allowed and DELETE otherwise."""

    statement_type = "TRUNCATE"

    def __init__(self, *args, delete_all: DeleteAllOperation | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.delete_all = delete_all or DeleteAllOperation(self.binder, self.column_type_reader)

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        with closing(connection.cursor()) as cursor:
            if not self.try_truncate(cursor, table, dialect):
                self.delete_all.delete_all(cursor, table, dialect)
        return 0

    def try_truncate(self, cursor: Any, table: Table, dialect: DatabaseType) -> bool:
        """
        Attempt a native TRUNCATE.

        On PostgreSQL a failed statement aborts the whole transaction, so the
        attempt runs inside a savepoint that is rolled back on failure.

        Returns:
            True if the table was truncated, False if the database rejected it
        """
        sql = self.builder(dialect).truncate(table.name)
        use_savepoint = dialect.aborts_transaction_on_error

        if use_savepoint:
            cursor.execute(dialect.savepoint_sql(SAVEPOINT_NAME))

        try:
            self.run(cursor, sql, table, dialect)
        except Exception as e:
            logger.debug(f"TRUNCATE rejected for {table.name}, falling back to DELETE: {e}")
            TRUNCATE_FALLBACKS.labels(table=table.name).inc()
            if use_savepoint:
                cursor.execute(dialect.rollback_to_savepoint_sql(SAVEPOINT_NAME))
                self._release(cursor, dialect)
            return False

        if use_savepoint:
            self._release(cursor, dialect)
        return True

    @staticmethod
    def _release(cursor: Any, dialect: DatabaseType) -> None:
        release = dialect.release_savepoint_sql(SAVEPOINT_NAME)
        if release:
            cursor.execute(release)
