"""
Pytest configuration and shared fixtures for fixture-sync tests.

Provides mock DB-API connections for unit tests and in-memory SQLite
databases for integration tests.
"""

import sqlite3
from pathlib import Path
from unittest.mock import MagicMock

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def clear_fixture_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DBFIXTURE_* settings from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("DBFIXTURE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)


def _make_cursor(class_name: str = "PostgreSQLCursor", rowcount: int = 1) -> MagicMock:
    """Mock cursor whose class name drives dialect detection."""
    cursor = MagicMock()
    cursor.__class__.__name__ = class_name
    cursor.rowcount = rowcount
    cursor.description = []
    cursor.fetchall.return_value = []
    cursor.fetchone.return_value = None
    return cursor


def _make_connection(cursor: MagicMock, class_name: str = "PostgreSQLConnection") -> MagicMock:
    """Mock connection handing out ``cursor`` on every ``cursor()`` call."""
    connection = MagicMock()
    connection.__class__.__name__ = class_name
    connection.cursor.return_value = cursor
    connection.autocommit = False
    return connection


@pytest.fixture
def cursor_factory():
    """Factory for mock cursors: cursor_factory(class_name, rowcount)."""
    return _make_cursor


@pytest.fixture
def connection_factory():
    """Factory for mock connections: connection_factory(cursor, class_name)."""
    return _make_connection


@pytest.fixture
def pg_cursor() -> MagicMock:
    return _make_cursor("PostgreSQLCursor")


@pytest.fixture
def pg_connection(pg_cursor: MagicMock) -> MagicMock:
    return _make_connection(pg_cursor, "PostgreSQLConnection")


@pytest.fixture
def sqlite_connection():
    """In-memory SQLite database with foreign keys enforced."""
    connection = sqlite3.connect(":memory:")
    connection.execute("PRAGMA foreign_keys = ON")
    yield connection
    connection.close()


@pytest.fixture
def parent_child_schema(sqlite_connection):
    """PARENT/CHILD tables where CHILD.PARENT_ID references PARENT.ID."""
    sqlite_connection.executescript(
        """
        CREATE TABLE PARENT (ID INTEGER PRIMARY KEY, NAME VARCHAR(50));
        CREATE TABLE CHILD (
            ID INTEGER PRIMARY KEY,
            PARENT_ID INTEGER NOT NULL REFERENCES PARENT(ID),
            LABEL VARCHAR(50)
        );
        """
    )
    return sqlite_connection
