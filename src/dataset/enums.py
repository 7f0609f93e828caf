"""
Operation and table ordering enumerations.
"""

from enum import Enum

from src.utils.errors import ConfigurationError


class Operation(str, Enum):
    """
    Write operation applied to a fixture's tables.

    CLEAN_INSERT and TRUNCATE_INSERT are composites: removal runs over the
    tables in reverse order, insertion in forward order.
    """

    NONE = "NONE"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    DELETE_ALL = "DELETE_ALL"
    REFRESH = "REFRESH"
    TRUNCATE_TABLE = "TRUNCATE_TABLE"
    CLEAN_INSERT = "CLEAN_INSERT"
    TRUNCATE_INSERT = "TRUNCATE_INSERT"

    @classmethod
    def parse(cls, value: "str | Operation") -> "Operation":
        """
        Resolve an operation from its name, case-insensitively.

        Raises:
            ConfigurationError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown operation: {value!r}") from None


class TableOrderingStrategy(str, Enum):
    """How tables are ordered before an operation runs."""

    AUTO = "AUTO"
    LOAD_ORDER_FILE = "LOAD_ORDER_FILE"
    FOREIGN_KEY = "FOREIGN_KEY"
    ALPHABETICAL = "ALPHABETICAL"

    @classmethod
    def parse(cls, value: "str | TableOrderingStrategy") -> "TableOrderingStrategy":
        """
        Resolve a strategy from its name, case-insensitively.

        Raises:
            ConfigurationError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown table ordering strategy: {value!r}") from None
