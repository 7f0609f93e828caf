"""
Database dialect enumeration for DB-API connections.

Fixture operations run against any PEP 249 connection; the dialect decides the
parameter placeholder and the savepoint syntax used around TRUNCATE attempts.
"""

from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    """
    Enumeration of supported database dialects.

    Inherits from str for JSON serialization compatibility and
    easy comparison with string values.
    """

    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    SQLITE = "sqlite"
    UNKNOWN = "unknown"

    @classmethod
    def from_cursor(cls, cursor: Any) -> "DatabaseType":
        """
        Detect database type from the cursor's driver module and class name.

        Args:
            cursor: Database cursor object

        Returns:
            DatabaseType enum value
        """
        return cls._detect(cursor)

    @classmethod
    def from_connection(cls, connection: Any) -> "DatabaseType":
        """
        Detect database type from a connection object.

        Args:
            connection: DB-API connection

        Returns:
            DatabaseType enum value
        """
        return cls._detect(connection)

    @classmethod
    def _detect(cls, obj: Any) -> "DatabaseType":
        klass = obj.__class__
        marker = f"{getattr(klass, '__module__', '')}.{klass.__name__}".lower()

        if "psycopg" in marker or "postgres" in marker:
            return cls.POSTGRESQL
        elif "pyodbc" in marker or "odbc" in marker or "sqlserver" in marker:
            return cls.SQLSERVER
        elif "sqlite" in marker:
            return cls.SQLITE
        else:
            return cls.UNKNOWN

    @property
    def placeholder(self) -> str:
        """Positional parameter marker for the dialect's driver."""
        if self == DatabaseType.POSTGRESQL:
            return "%s"
        return "?"

    @property
    def aborts_transaction_on_error(self) -> bool:
        """Whether one failed statement leaves the transaction unusable."""
        return self == DatabaseType.POSTGRESQL

    def savepoint_sql(self, name: str) -> str:
        if self == DatabaseType.SQLSERVER:
            return f"SAVE TRANSACTION {name}"
        return f"SAVEPOINT {name}"

    def rollback_to_savepoint_sql(self, name: str) -> str:
        if self == DatabaseType.SQLSERVER:
            return f"ROLLBACK TRANSACTION {name}"
        return f"ROLLBACK TO SAVEPOINT {name}"

    def release_savepoint_sql(self, name: str) -> str | None:
        """
        Statement releasing a savepoint, or None when the dialect has none.

        SQL Server savepoints live until the transaction ends.
        """
        if self == DatabaseType.SQLSERVER:
            return None
        return f"RELEASE SAVEPOINT {name}"
