"""
Conversion of textual cell values to typed Python values.

``try_convert`` is the typed path and answers None when the text does not
parse; ``convert`` adds the fallback to the raw string. Values from text
fixtures pass through here before being bound as statement parameters.
"""

import datetime
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from src.binding.lob import decode_binary
from src.binding.sql_types import SqlTypeCategory

TRUE_LITERALS = frozenset({"true", "1", "yes", "y"})
FALSE_LITERALS = frozenset({"false", "0", "no", "n"})

# Errors raised by the parsers below for malformed text
CONVERSION_ERRORS = (ValueError, ArithmeticError)


def parse_boolean(text: str) -> bool:
    """
    Interpret fixture text as a boolean.

    ``true``, ``1``, ``yes`` and ``y`` (case-insensitive, surrounding
    whitespace ignored) are True; everything else is False.
    """
    return text.strip().lower() in TRUE_LITERALS


def parse_integer(text: str) -> int:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        # "10.0" from spreadsheets; "10.5" stays an error
        number = Decimal(text)
        if number != number.to_integral_value():
            raise ValueError(f"Not an integer: {text!r}") from None
        return int(number)


def parse_decimal(text: str) -> Decimal:
    return Decimal(text.strip())


def parse_float(text: str) -> float:
    return float(text.strip())


def _split_datetime(text: str) -> tuple[str, str | None]:
    text = text.strip()
    for separator in (" ", "T"):
        if separator in text:
            date_part, time_part = text.split(separator, 1)
            return date_part, time_part.strip()
    return text, None


def parse_date(text: str) -> datetime.date:
    """Parse ``YYYY-MM-DD``, ignoring any time portion."""
    date_part, _ = _split_datetime(text)
    return datetime.date.fromisoformat(date_part)


def parse_time(text: str) -> datetime.time:
    """Parse ``HH:MM[:SS[.fff]]``, alone or inside a datetime string."""
    first, rest = _split_datetime(text)
    time_part = rest if rest is not None else first
    return datetime.time.fromisoformat(time_part.split(".", 1)[0])


def parse_timestamp(text: str) -> datetime.datetime:
    """Parse an ISO-8601 date-time with a space or ``T`` separator."""
    return datetime.datetime.fromisoformat(text.strip())


PARSERS: dict[SqlTypeCategory, Callable[[str], Any]] = {
    SqlTypeCategory.INTEGER: parse_integer,
    SqlTypeCategory.FLOAT: parse_float,
    SqlTypeCategory.DECIMAL: parse_decimal,
    SqlTypeCategory.BOOLEAN: parse_boolean,
    SqlTypeCategory.DATE: parse_date,
    SqlTypeCategory.TIME: parse_time,
    SqlTypeCategory.TIMESTAMP: parse_timestamp,
    SqlTypeCategory.BINARY: decode_binary,
    SqlTypeCategory.TEXT: str,
}


def try_convert(text: str, category: SqlTypeCategory) -> Any | None:
    """
    Convert text to the Python type for ``category``.

    Returns:
        The converted value, or None when the text is malformed
    """
    try:
        return PARSERS[category](text)
    except CONVERSION_ERRORS:
        return None


def convert(text: str, category: SqlTypeCategory) -> Any:
    """Convert text for ``category``, falling back to the text itself."""
    converted = try_convert(text, category)
    return text if converted is None else converted
