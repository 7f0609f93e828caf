"""Unit tests for dialect detection and dialect-specific SQL."""

import sqlite3
from unittest.mock import Mock

import pytest

from src.utils.database_types import DatabaseType


class TestDialectDetection:
    """Test DatabaseType detection from cursors and connections."""

    @pytest.mark.parametrize(
        "class_name,expected",
        [
            ("PostgreSQLCursor", DatabaseType.POSTGRESQL),
            ("PyODBCCursor", DatabaseType.SQLSERVER),
            ("SQLServerCursor", DatabaseType.SQLSERVER),
            ("SomethingElse", DatabaseType.UNKNOWN),
        ],
    )
    def test_detects_from_class_name(self, class_name, expected):
        cursor = Mock()
        cursor.__class__.__name__ = class_name

        assert DatabaseType.from_cursor(cursor) == expected

    def test_detects_sqlite_connection(self):
        connection = sqlite3.connect(":memory:")
        try:
            assert DatabaseType.from_connection(connection) == DatabaseType.SQLITE
        finally:
            connection.close()

    def test_is_string_enum(self):
        assert DatabaseType.POSTGRESQL == "postgresql"


class TestDialectSql:
    """Test placeholders and savepoint statements per dialect."""

    def test_placeholders(self):
        assert DatabaseType.POSTGRESQL.placeholder == "%s"
        assert DatabaseType.SQLSERVER.placeholder == "?"
        assert DatabaseType.SQLITE.placeholder == "?"
        assert DatabaseType.UNKNOWN.placeholder == "?"

    def test_only_postgres_aborts_transaction_on_error(self):
        assert DatabaseType.POSTGRESQL.aborts_transaction_on_error
        assert not DatabaseType.SQLSERVER.aborts_transaction_on_error
        assert not DatabaseType.SQLITE.aborts_transaction_on_error

    def test_postgres_savepoints(self):
        dialect = DatabaseType.POSTGRESQL

        assert dialect.savepoint_sql("sp") == "SAVEPOINT sp"
        assert dialect.rollback_to_savepoint_sql("sp") == "ROLLBACK TO SAVEPOINT sp"
        assert dialect.release_savepoint_sql("sp") == "RELEASE SAVEPOINT sp"

    def test_sqlserver_savepoints(self):
        dialect = DatabaseType.SQLSERVER

        assert dialect.savepoint_sql("sp") == "SAVE TRANSACTION sp"
        assert dialect.rollback_to_savepoint_sql("sp") == "ROLLBACK TRANSACTION sp"
        assert dialect.release_savepoint_sql("sp") is None
