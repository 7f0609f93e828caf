"""
Exception hierarchy shared by the fixture packages.
"""

from typing import Any


class DatabaseTesterError(Exception):
    """Base exception for fixture preparation and verification errors."""

    pass


class ConfigurationError(DatabaseTesterError):
    """Raised when a configuration value cannot be interpreted."""

    pass


class DatabaseOperationError(DatabaseTesterError):
    """
    Raised when a write operation fails and its transaction was rolled back.

    The driver error is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        operation: Any = None,
        table: str | None = None,
        row_index: int | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.table = table
        self.row_index = row_index


class ForeignKeyMetadataError(DatabaseTesterError):
    """Raised when foreign key metadata cannot be read."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class LobConversionError(DatabaseTesterError):
    """Raised when LOB content cannot be read from the driver."""

    def __init__(self, kind: str):
        super().__init__(f"Failed to read {kind} content")
        self.kind = kind


class ComparisonAssertionError(AssertionError):
    """
    Aggregated comparison failure.

    Carries the full ComparisonResult so callers can inspect every
    difference rather than parse the message.
    """

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result
