"""
Parameter binding for generated statements.

DB-API drivers take one parameter sequence per row, so binding means
computing the driver value for each placeholder: NULL stays None, native
values pass through, and text is converted for the destination column's
type category. Text that does not convert is bound as-is and left to the
driver.
"""

import logging
from collections.abc import MutableSequence, Sequence
from typing import Any

from prometheus_client import Counter

from src.binding.column_types import ColumnTypes
from src.binding.sql_types import SqlTypeCategory
from src.binding.values import try_convert
from src.dataset.model import CellValue, Row
from src.utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)

CONVERSION_FALLBACKS = get_or_create_metric(
    lambda: Counter(
        "dbfixture_value_conversion_fallbacks_total",
        "Text values bound unconverted because they did not parse",
        ["category"],
    ),
    "dbfixture_value_conversion_fallbacks_total",
)


class ParameterBinder:
    """Computes driver parameters from cell values."""

    def to_parameter(self, value: Any, category: SqlTypeCategory | None = None) -> Any:
        """
        Compute the driver value for one cell.

        Args:
            value: CellValue or raw value
            category: Destination column category; None binds text unconverted

        Returns:
            The value to hand to the driver
        """
        cell = CellValue.of(value)
        if cell.is_null:
            return None

        raw = cell.value
        if not isinstance(raw, str) or category is None or category == SqlTypeCategory.TEXT:
            return raw

        converted = try_convert(raw, category)
        if converted is None:
            return self._generic(raw, category)
        return converted

    def _generic(self, text: str, category: SqlTypeCategory) -> str:
        logger.debug(f"Could not convert {text!r} to {category.value}, binding as text")
        CONVERSION_FALLBACKS.labels(category=category.value).inc()
        return text

    def bind(
        self,
        parameters: MutableSequence[Any],
        index: int,
        value: Any,
        category: SqlTypeCategory | None = None,
    ) -> None:
        """
        Bind one value into a parameter list at a 0-based index.

        The list grows with None entries when ``index`` is past its end.
        """
        if index < 0:
            raise IndexError(f"Parameter index must be >= 0, got {index}")
        while len(parameters) <= index:
            parameters.append(None)
        parameters[index] = self.to_parameter(value, category)

    def bind_row(
        self,
        row: Row,
        columns: Sequence[str],
        column_types: ColumnTypes,
    ) -> tuple[Any, ...]:
        """Parameters for ``columns`` of ``row``, in column order."""
        parameters: list[Any] = []
        for index, column in enumerate(columns):
            self.bind(parameters, index, row.get(column), column_types.category(column))
        return tuple(parameters)
