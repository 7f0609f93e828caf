"""
Fixture data model, operation enums and configuration.
"""

from .config import Configuration, OperationDefaults
from .enums import Operation, TableOrderingStrategy
from .load_order import parse_load_order, read_load_order
from .model import DEFAULT_SCENARIO_MARKER, CellValue, DataSet, Row, Table

__all__ = [
    "CellValue",
    "Row",
    "Table",
    "DataSet",
    "DEFAULT_SCENARIO_MARKER",
    "Operation",
    "TableOrderingStrategy",
    "Configuration",
    "OperationDefaults",
    "parse_load_order",
    "read_load_order",
]
