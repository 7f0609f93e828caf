"""
DML generation for fixture operations.

Statements use positional placeholders in the dialect's paramstyle.
Table and column names are validated and emitted unquoted.
"""

from collections.abc import Sequence

from src.utils.database_types import DatabaseType
from src.utils.sql_safety import validate_identifier, validate_identifiers, validate_schema_table


class SqlBuilder:
    """Builds the statements used by the table operations."""

    def __init__(self, dialect: DatabaseType = DatabaseType.UNKNOWN):
        self.dialect = dialect
        self.placeholder = dialect.placeholder

    def insert(self, table_name: str, columns: Sequence[str]) -> str:
        """``INSERT INTO t (a, b) VALUES (?, ?)``"""
        validate_schema_table(table_name)
        if not columns:
            raise ValueError(f"Cannot build INSERT for table {table_name} without columns")
        column_list = ", ".join(validate_identifiers(columns))
        placeholders = ", ".join(self.placeholder for _ in columns)
        return f"INSERT INTO {table_name} ({column_list}) VALUES ({placeholders})"

    def update_by_key(self, table_name: str, columns: Sequence[str]) -> str:
        """
        ``UPDATE t SET b = ?, c = ? WHERE a = ?``

        The first column is the key; parameters go value columns first, key last.
        """
        validate_schema_table(table_name)
        if len(columns) < 2:
            raise ValueError(
                f"Cannot build UPDATE for table {table_name}: need a key and at least one value column"
            )
        key, *value_columns = validate_identifiers(columns)
        assignments = ", ".join(f"{column} = {self.placeholder}" for column in value_columns)
        return f"UPDATE {table_name} SET {assignments} WHERE {key} = {self.placeholder}"

    def delete_by_key(self, table_name: str, key_column: str) -> str:
        """``DELETE FROM t WHERE a = ?``"""
        validate_schema_table(table_name)
        return f"DELETE FROM {table_name} WHERE {validate_identifier(key_column)} = {self.placeholder}"

    def exists_by_key(self, table_name: str, key_column: str) -> str:
        """``SELECT 1 FROM t WHERE a = ?``"""
        validate_schema_table(table_name)
        return f"SELECT 1 FROM {table_name} WHERE {validate_identifier(key_column)} = {self.placeholder}"

    def delete_all(self, table_name: str) -> str:
        return f"DELETE FROM {validate_schema_table(table_name)}"

    def truncate(self, table_name: str) -> str:
        return f"TRUNCATE TABLE {validate_schema_table(table_name)}"

    def select(
        self,
        table_name: str,
        columns: Sequence[str] | None = None,
        order_by: Sequence[str] | None = None,
    ) -> str:
        """``SELECT a, b FROM t [ORDER BY a]``; all columns when none are given."""
        validate_schema_table(table_name)
        column_list = ", ".join(validate_identifiers(columns)) if columns else "*"
        sql = f"SELECT {column_list} FROM {table_name}"
        if order_by:
            sql += f" ORDER BY {', '.join(validate_identifiers(order_by))}"
        return sql
