"""
Per-column comparison strategies.

A strategy decides whether an expected and an actual cell value are equal.
Strategies are looked up by column name case-insensitively; columns without
one are compared with STRICT.
"""

import datetime
import math
import numbers
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from src.binding.values import (
    CONVERSION_ERRORS,
    FALSE_LITERALS,
    TRUE_LITERALS,
    parse_date,
    parse_decimal,
    parse_float,
    parse_timestamp,
)


class StrategyType(str, Enum):
    STRICT = "STRICT"
    NUMERIC = "NUMERIC"
    CASE_INSENSITIVE = "CASE_INSENSITIVE"
    IGNORE = "IGNORE"
    NOT_NULL = "NOT_NULL"
    REGEX = "REGEX"
    TIMESTAMP_FLEXIBLE = "TIMESTAMP_FLEXIBLE"


# "2024-01-01 10:00:00.0" as rendered by some drivers
ZERO_FRACTION_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(\.0+)?$")


def normalize_text(text: str) -> str:
    if ZERO_FRACTION_TIMESTAMP.match(text):
        return text.split(".", 1)[0]
    return text


def boolean_from_text(text: str) -> bool | None:
    """True or False for a boolean literal, None for anything else."""
    word = text.strip().lower()
    if word in TRUE_LITERALS:
        return True
    if word in FALSE_LITERALS:
        return False
    return None


def _number_equals_text(text: str, number: numbers.Number) -> bool:
    try:
        if isinstance(number, float):
            return math.isclose(parse_float(text), number, rel_tol=1e-9)
        return parse_decimal(text) == number
    except CONVERSION_ERRORS:
        # SQLite stores booleans as 0 and 1
        flag = boolean_from_text(text)
        return flag is not None and number in (0, 1) and int(flag) == number


def text_equals(text: str, value: Any) -> bool:
    """
    Compare fixture text with a typed database value.

    The text is parsed toward the value's type: numbers compare by value,
    booleans accept true/1/yes/y and false/0/no/n, and dates, times and
    timestamps compare after ISO-8601 parsing. Other values compare by
    their string form.
    """
    if isinstance(value, bool):
        return boolean_from_text(text) is value
    if isinstance(value, numbers.Number):
        return _number_equals_text(text, value)

    try:
        if isinstance(value, datetime.datetime):
            return parse_timestamp(normalize_text(text.strip())) == value
        if isinstance(value, datetime.date):
            return parse_date(text) == value
        if isinstance(value, datetime.time):
            return datetime.time.fromisoformat(text.strip()) == value
    except CONVERSION_ERRORS:
        return False

    return normalize_text(text) == normalize_text(str(value))


def strict_equals(expected: Any, actual: Any) -> bool:
    """
    Type-aware equality.

    Python treats ``1 == True`` and ``100 == Decimal("100.00")`` as equal;
    here numbers and booleans only match values of the same type. Text on
    one side is parsed toward the other side's type, since fixtures loaded
    from text files hold strings for every column.
    """
    if isinstance(expected, str) and isinstance(actual, str):
        return normalize_text(expected) == normalize_text(actual)
    if isinstance(expected, str):
        return text_equals(expected, actual)
    if isinstance(actual, str):
        return text_equals(actual, expected)
    if isinstance(expected, (bool, numbers.Number)) or isinstance(actual, (bool, numbers.Number)):
        return type(expected) is type(actual) and expected == actual
    return expected == actual


def to_decimal(value: Any) -> Decimal | None:
    """Numeric value of a number or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except (ValueError, ArithmeticError):
            return None
    return None


def to_epoch_second(value: Any) -> int | None:
    """
    Epoch second of a temporal value or ISO-8601 string; None if not temporal.

    Naive values are taken as UTC and fractional seconds are dropped.
    """
    if isinstance(value, datetime.datetime):
        moment = value
    elif isinstance(value, datetime.date):
        moment = datetime.datetime.combine(value, datetime.time())
    elif isinstance(value, str):
        try:
            moment = datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.UTC)
    return math.floor(moment.timestamp())


@dataclass(frozen=True)
class ComparisonStrategy:
    """
    A named comparison rule; REGEX strategies carry a compiled pattern.

    Use the shared constants (``ComparisonStrategy.STRICT`` ...) and
    ``ComparisonStrategy.regex(pattern)``.
    """

    type: StrategyType
    pattern: re.Pattern | None = None

    STRICT: ClassVar["ComparisonStrategy"]
    NUMERIC: ClassVar["ComparisonStrategy"]
    CASE_INSENSITIVE: ClassVar["ComparisonStrategy"]
    IGNORE: ClassVar["ComparisonStrategy"]
    NOT_NULL: ClassVar["ComparisonStrategy"]
    TIMESTAMP_FLEXIBLE: ClassVar["ComparisonStrategy"]

    def __post_init__(self):
        if self.type == StrategyType.REGEX and self.pattern is None:
            raise ValueError("REGEX strategy requires a pattern")

    @classmethod
    def regex(cls, pattern: "str | re.Pattern") -> "ComparisonStrategy":
        """
        Strategy matching the whole string form of the actual value.

        Raises:
            re.error: If the pattern does not compile
        """
        if not isinstance(pattern, re.Pattern):
            pattern = re.compile(pattern)
        return cls(StrategyType.REGEX, pattern)

    @classmethod
    def parse(cls, value: "str | ComparisonStrategy") -> "ComparisonStrategy":
        """
        Parse ``STRICT``, ``numeric``, ``REGEX:<pattern>`` and similar.

        Raises:
            ValueError: If the strategy name is unknown
        """
        if isinstance(value, ComparisonStrategy):
            return value
        name, _, pattern = value.partition(":")
        try:
            strategy_type = StrategyType[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown comparison strategy: {value!r}") from None
        if strategy_type == StrategyType.REGEX:
            return cls.regex(pattern)
        return cls(strategy_type)

    def matches(self, expected: Any, actual: Any) -> bool:
        """Whether ``actual`` is acceptable for ``expected`` under this strategy."""
        if self.type == StrategyType.IGNORE:
            return True
        if self.type == StrategyType.NOT_NULL:
            return actual is not None
        if self.type == StrategyType.REGEX:
            return actual is not None and self.pattern.fullmatch(str(actual)) is not None

        if expected is None or actual is None:
            return expected is None and actual is None

        if self.type == StrategyType.NUMERIC:
            left, right = to_decimal(expected), to_decimal(actual)
            if left is None or right is None:
                return strict_equals(expected, actual)
            try:
                return left == right
            except ArithmeticError:
                return False

        if self.type == StrategyType.CASE_INSENSITIVE:
            return str(expected).casefold() == str(actual).casefold()

        if self.type == StrategyType.TIMESTAMP_FLEXIBLE:
            left, right = to_epoch_second(expected), to_epoch_second(actual)
            if left is None or right is None:
                return str(expected) == str(actual)
            return left == right

        return strict_equals(expected, actual)

    def __str__(self) -> str:
        if self.pattern is not None:
            return f"{self.type.value}:{self.pattern.pattern}"
        return self.type.value


ComparisonStrategy.STRICT = ComparisonStrategy(StrategyType.STRICT)
ComparisonStrategy.NUMERIC = ComparisonStrategy(StrategyType.NUMERIC)
ComparisonStrategy.CASE_INSENSITIVE = ComparisonStrategy(StrategyType.CASE_INSENSITIVE)
ComparisonStrategy.IGNORE = ComparisonStrategy(StrategyType.IGNORE)
ComparisonStrategy.NOT_NULL = ComparisonStrategy(StrategyType.NOT_NULL)
ComparisonStrategy.TIMESTAMP_FLEXIBLE = ComparisonStrategy(StrategyType.TIMESTAMP_FLEXIBLE)


@dataclass(frozen=True)
class ColumnStrategyMapping:
    """A column name paired with the strategy used to compare it."""

    column: str
    strategy: ComparisonStrategy

    def __post_init__(self):
        if not self.column or not self.column.strip():
            raise ValueError("Column name cannot be empty")
        object.__setattr__(self, "strategy", ComparisonStrategy.parse(self.strategy))


StrategySource = Mapping[str, Any] | Iterable[ColumnStrategyMapping] | None


class ColumnStrategies:
    """Case-insensitive column to strategy lookup defaulting to STRICT."""

    def __init__(self, source: StrategySource = None):
        self._strategies: dict[str, ComparisonStrategy] = {}
        self.update(source)

    def update(self, source: StrategySource) -> None:
        if source is None:
            return
        if isinstance(source, ColumnStrategies):
            self._strategies.update(source._strategies)
            return
        items = source.items() if isinstance(source, Mapping) else (
            (mapping.column, mapping.strategy) for mapping in source
        )
        for column, strategy in items:
            self._strategies[column.upper()] = ComparisonStrategy.parse(strategy)

    def get(self, column: str) -> ComparisonStrategy:
        return self._strategies.get(column.upper(), ComparisonStrategy.STRICT)

    def merged(self, source: StrategySource) -> "ColumnStrategies":
        combined = ColumnStrategies(self)
        combined.update(source)
        return combined

    def __len__(self) -> int:
        return len(self._strategies)

    def __repr__(self) -> str:
        shown = {column: str(strategy) for column, strategy in self._strategies.items()}
        return f"ColumnStrategies({shown!r})"
