"""
REFRESH operation: upsert by probe.

Each row is first updated by key; when no row was affected it is inserted.
The two statements are not atomic against concurrent writers.
"""

import logging
from contextlib import closing
from typing import Any

from src.binding.column_types import ColumnTypes
from src.dataset.model import Row, Table
from src.operation.base import ROWS_WRITTEN, TableOperation
from src.operation.insert import InsertOperation
from src.utils.database_types import DatabaseType
from src.utils.errors import DatabaseOperationError

logger = logging.getLogger(__name__)


class RefreshOperation(TableOperation):
    """Updates existing rows and inserts missing ones, matched on the first column."""

    statement_type = "REFRESH"

    def __init__(self, *args, insert: InsertOperation | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.insert = insert or InsertOperation(self.binder, self.column_type_reader)

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        if not table.rows or not table.columns:
            logger.debug(f"No rows to refresh in {table.name}")
            return 0

        types = self.column_types(connection, table, dialect)
        updated = inserted = 0

        with closing(connection.cursor()) as cursor:
            for index, row in enumerate(table.rows):
                try:
                    if self.try_update_row(cursor, table, row, types, dialect):
                        updated += 1
                    else:
                        self.insert.insert_row(cursor, table, row, types, dialect)
                        inserted += 1
                except Exception as e:
                    raise DatabaseOperationError(
                        f"REFRESH failed for table {table.name} at row {index}: {e}",
                        table=table.name,
                        row_index=index,
                    ) from e

        logger.debug(f"Refreshed {table.name}: {updated} updated, {inserted} inserted")
        return updated + inserted

    def try_update_row(
        self,
        cursor: Any,
        table: Table,
        row: Row,
        types: ColumnTypes,
        dialect: DatabaseType,
    ) -> bool:
        """
        Update one row by key.

        A table whose only column is the key has nothing to update; its rows
        are looked up with SELECT instead. The same lookup decides when the driver
        reports an unknown row count (-1) for the UPDATE.

        Returns:
            True if a row with the key exists (and was updated)
        """
        builder = self.builder(dialect)
        key, *value_columns = table.columns

        if not value_columns:
            return self.key_exists(cursor, table, row, types, dialect)

        parameters = self.binder.bind_row(row, [*value_columns, key], types)
        affected = self.run(cursor, builder.update_by_key(table.name, table.columns), table,
                            dialect, parameters, statement_type="UPDATE")
        if affected < 0:
            logger.debug(f"Unknown UPDATE row count for {table.name}, checking key with SELECT")
            if not self.key_exists(cursor, table, row, types, dialect):
                return False
        elif affected == 0:
            return False

        ROWS_WRITTEN.labels(table=table.name, statement="UPDATE").inc()
        return True

    def key_exists(
        self,
        cursor: Any,
        table: Table,
        row: Row,
        types: ColumnTypes,
        dialect: DatabaseType,
    ) -> bool:
        key = table.columns[0]
        parameters = self.binder.bind_row(row, [key], types)
        self.run(cursor, self.builder(dialect).exists_by_key(table.name, key), table, dialect,
                 parameters, statement_type="SELECT")
        return cursor.fetchone() is not None
