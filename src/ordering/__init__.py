"""
Dependency-aware table ordering.
"""

from collections.abc import Sequence
from typing import Any

from src.dataset.enums import TableOrderingStrategy
from src.dataset.model import Table

from .dependencies import ForeignKeyDependencyExtractor
from .resolver import TableOrderResolver
from .topological import topological_sort


def resolve_order(
    tables: Sequence[Table],
    connection: Any,
    schema: str | None = None,
    strategy: TableOrderingStrategy = TableOrderingStrategy.FOREIGN_KEY,
    load_order: Sequence[str] | None = None,
) -> list[Table]:
    """Order ``tables`` for writing; see TableOrderResolver.resolve_order."""
    return TableOrderResolver().resolve_order(tables, connection, schema, strategy, load_order)


__all__ = [
    "resolve_order",
    "TableOrderResolver",
    "ForeignKeyDependencyExtractor",
    "topological_sort",
]
