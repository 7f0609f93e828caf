"""
Foreign key dependency extraction from live database metadata.

The result maps each table to the tables it references, limited to the
tables being ordered. It is rebuilt on every call because the schema can
change between test runs.
"""

import logging
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from src.utils.database_types import DatabaseType
from src.utils.errors import ForeignKeyMetadataError
from src.utils.sql_safety import validate_identifier, validate_schema_table
from src.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

POSTGRES_REFERENCED_TABLES = """
    SELECT DISTINCT parent.relname
    FROM pg_catalog.pg_constraint con
    JOIN pg_catalog.pg_class child ON child.oid = con.conrelid
    JOIN pg_catalog.pg_namespace ns ON ns.oid = child.relnamespace
    JOIN pg_catalog.pg_class parent ON parent.oid = con.confrelid
    WHERE con.contype = 'f'
      AND lower(child.relname) = lower(%s)
      AND ns.nspname = COALESCE(%s, current_schema())
"""

SQLSERVER_REFERENCED_TABLES = """
    SELECT DISTINCT OBJECT_NAME(fk.referenced_object_id)
    FROM sys.foreign_keys fk
    WHERE OBJECT_NAME(fk.parent_object_id) = ?
      AND OBJECT_SCHEMA_NAME(fk.parent_object_id) = COALESCE(?, SCHEMA_NAME())
"""

ANSI_REFERENCED_TABLES = """
    SELECT DISTINCT pk.table_name
    FROM information_schema.referential_constraints rc
    JOIN information_schema.table_constraints fk
      ON fk.constraint_name = rc.constraint_name
     AND fk.constraint_schema = rc.constraint_schema
    JOIN information_schema.table_constraints pk
      ON pk.constraint_name = rc.unique_constraint_name
     AND pk.constraint_schema = rc.unique_constraint_schema
    WHERE UPPER(fk.table_name) = UPPER(?)
"""


def split_table_name(table_name: str, schema: str | None = None) -> tuple[str | None, str]:
    """Split ``schema.table``; an explicit qualifier wins over ``schema``."""
    if "." in table_name:
        qualifier, name = table_name.split(".", 1)
        return qualifier, name
    return schema, table_name


class ForeignKeyDependencyExtractor:
    """Reads imported-key metadata for a set of tables."""

    def extract(
        self,
        table_names: Sequence[str],
        connection: Any,
        schema: str | None = None,
    ) -> dict[str, set[str]]:
        """
        Build the dependency map for ``table_names``.

        References to tables outside ``table_names`` and self-references are
        dropped; tables without remaining dependencies are omitted. Matching
        is case-insensitive and the returned names use the caller's spelling.

        Args:
            table_names: Tables being ordered
            connection: DB-API connection
            schema: Schema of unqualified table names; the connection's
                default schema when None

        Returns:
            Child table name to the set of parent table names

        Raises:
            ForeignKeyMetadataError: If any metadata query fails
        """
        if len(table_names) <= 1:
            return {}

        for name in table_names:
            validate_schema_table(name)
        if schema:
            validate_identifier(schema)

        by_name = {split_table_name(name)[1].casefold(): name for name in table_names}
        dialect = DatabaseType.from_connection(connection)
        dependencies: dict[str, set[str]] = {}
        current = None

        with trace_operation("fixture.extract_dependencies", tables=len(table_names), dialect=dialect.value):
            try:
                with closing(connection.cursor()) as cursor:
                    for current in table_names:
                        parents = {
                            by_name[parent.casefold()]
                            for parent in self._referenced_tables(cursor, dialect, current, schema)
                            if parent and parent.casefold() in by_name
                        }
                        parents.discard(current)
                        if parents:
                            dependencies[current] = parents
            except Exception as e:
                raise ForeignKeyMetadataError(
                    f"Failed to read foreign key metadata for table {current}: {e}",
                    table=current,
                ) from e

        logger.debug(f"Foreign key dependencies: {dependencies}")
        return dependencies

    def _referenced_tables(
        self,
        cursor: Any,
        dialect: DatabaseType,
        table_name: str,
        schema: str | None,
    ) -> list[str]:
        table_schema, table = split_table_name(table_name, schema)

        if dialect == DatabaseType.SQLITE:
            prefix = f"{table_schema}." if table_schema else ""
            cursor.execute(f"PRAGMA {prefix}foreign_key_list({table})")
            # (id, seq, table, from, to, on_update, on_delete, match)
            return [row[2] for row in cursor.fetchall()]

        if dialect == DatabaseType.POSTGRESQL:
            cursor.execute(POSTGRES_REFERENCED_TABLES, (table, table_schema))
        elif dialect == DatabaseType.SQLSERVER:
            cursor.execute(SQLSERVER_REFERENCED_TABLES, (table, table_schema))
        elif table_schema:
            cursor.execute(
                ANSI_REFERENCED_TABLES + "  AND UPPER(fk.table_schema) = UPPER(?)",
                (table, table_schema),
            )
        else:
            cursor.execute(ANSI_REFERENCED_TABLES, (table,))

        return [row[0] for row in cursor.fetchall()]
