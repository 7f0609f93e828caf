"""
Value conversion and parameter binding.

Turns fixture cells into typed driver parameters using live column
metadata, and renders LOB values read back from the database as
comparable text.
"""

from collections.abc import MutableSequence
from typing import Any

from .binder import ParameterBinder
from .column_types import ColumnTypes, column_types_from_description, read_column_types
from .lob import BASE64_PREFIX, LobConverter, decode_binary, encode_binary
from .sql_types import SqlTypeCategory, category_from_type_code, category_from_type_name
from .values import convert, parse_boolean, try_convert

_default_binder = ParameterBinder()


def bind(
    parameters: MutableSequence[Any],
    index: int,
    value: Any,
    category: SqlTypeCategory | None = None,
) -> None:
    """Bind ``value`` into ``parameters[index]`` with the default binder."""
    _default_binder.bind(parameters, index, value, category)


__all__ = [
    "bind",
    "ParameterBinder",
    "ColumnTypes",
    "read_column_types",
    "column_types_from_description",
    "LobConverter",
    "BASE64_PREFIX",
    "encode_binary",
    "decode_binary",
    "SqlTypeCategory",
    "category_from_type_code",
    "category_from_type_name",
    "convert",
    "try_convert",
    "parse_boolean",
]
