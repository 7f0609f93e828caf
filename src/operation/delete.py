"""
DELETE and DELETE_ALL operations.
"""

import logging
from contextlib import closing
from typing import Any

from src.dataset.model import Table
from src.operation.base import TableOperation
from src.utils.database_types import DatabaseType

logger = logging.getLogger(__name__)


class DeleteOperation(TableOperation):
    """Deletes the fixture rows, matched on the first column."""

    statement_type = "DELETE"

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        if not table.rows or not table.columns:
            logger.debug(f"No rows to delete from {table.name}")
            return 0

        key = table.columns[0]
        sql = self.builder(dialect).delete_by_key(table.name, key)
        types = self.column_types(connection, table, dialect)
        batch = [
            self.binder.bind_row(row, [key], types)
            for row in table.rows
            if not row.get(key).is_null
        ]

        with closing(connection.cursor()) as cursor:
            return self.run_batch(cursor, sql, table, dialect, batch)


class DeleteAllOperation(TableOperation):
    """Removes every row of each table, regardless of fixture rows."""

    statement_type = "DELETE"

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        with closing(connection.cursor()) as cursor:
            self.delete_all(cursor, table, dialect)
        return 0

    def delete_all(self, cursor: Any, table: Table, dialect: DatabaseType) -> int:
        deleted = self.run(cursor, self.builder(dialect).delete_all(table.name), table, dialect,
                           statement_type="DELETE")
        logger.debug(f"Deleted all rows from {table.name} (rowcount={deleted})")
        return deleted
