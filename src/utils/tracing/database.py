"""
Database statement tracing.
"""

from opentelemetry import trace

from .context import trace_operation


def trace_database_query(statement_type: str, table: str, dialect: str = "unknown", sql: str | None = None):
    """
    Context manager tracing one generated statement.

    Args:
        statement_type: INSERT, UPDATE, DELETE, TRUNCATE or SELECT
        table: Table the statement targets
        dialect: Database dialect name
        sql: Statement text, recorded as ``db.statement``

    Example:
        >>> with trace_database_query("DELETE", "ORDERS", "postgresql"):
        ...     cursor.execute("DELETE FROM ORDERS")
    """
    attributes = {
        "db.operation": statement_type,
        "db.table": table,
        "db.system": dialect,
    }
    if sql is not None:
        attributes["db.statement"] = sql

    return trace_operation(
        f"db.{statement_type.lower()}",
        kind=trace.SpanKind.CLIENT,
        **attributes,
    )
