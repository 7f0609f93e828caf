"""
Fixture configuration.

Settings are passed explicitly rather than discovered: callers build a
Configuration (or read one from the environment) and hand it to
``prepare`` and ``ExpectationVerifier``.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.dataset.enums import Operation, TableOrderingStrategy
from src.dataset.load_order import LOAD_ORDER_FILE_NAME, read_load_order
from src.dataset.model import DEFAULT_SCENARIO_MARKER

logger = logging.getLogger(__name__)

ENV_PREFIX = "DBFIXTURE_"


@dataclass(frozen=True)
class OperationDefaults:
    """Operations used when a fixture does not name one."""

    preparation: Operation = Operation.CLEAN_INSERT
    expectation: Operation = Operation.NONE


def _split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Configuration:
    """
    Settings for preparing and verifying one fixture.

    Attributes:
        data_source_name: Name of the connection the fixture targets
        resource_location: Directory holding fixture files and load-order.txt
        scenario_names: Scenarios whose rows are kept; empty keeps all rows
        scenario_marker: Column marking the scenario of each row
        column_strategies: Column name to comparison strategy
        operations: Default preparation and expectation operations
        table_ordering: Ordering strategy applied before writing
        schema: Schema used for foreign key metadata lookups
        load_order_file_name: File name read from resource_location
        global_exclude_columns: Columns dropped from every expected table
    """

    data_source_name: str | None = None
    resource_location: str | None = None
    scenario_names: tuple[str, ...] = ()
    scenario_marker: str = DEFAULT_SCENARIO_MARKER
    column_strategies: Mapping[str, Any] = field(default_factory=dict, hash=False)
    operations: OperationDefaults = field(default_factory=OperationDefaults)
    table_ordering: TableOrderingStrategy = TableOrderingStrategy.AUTO
    schema: str | None = None
    load_order_file_name: str = LOAD_ORDER_FILE_NAME
    global_exclude_columns: tuple[str, ...] = ()

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides) -> "Configuration":
        """
        Build a configuration from environment variables.

        Environment variables (with the default prefix):
            DBFIXTURE_DATA_SOURCE: Data source name
            DBFIXTURE_RESOURCE_LOCATION: Fixture directory
            DBFIXTURE_SCENARIO_NAMES: Comma-separated scenario names
            DBFIXTURE_SCENARIO_MARKER: Scenario marker column (default: [Scenario])
            DBFIXTURE_PREPARATION_OPERATION: Operation name (default: CLEAN_INSERT)
            DBFIXTURE_EXPECTATION_OPERATION: Operation name (default: NONE)
            DBFIXTURE_TABLE_ORDERING: Ordering strategy name (default: AUTO)
            DBFIXTURE_SCHEMA: Schema name
            DBFIXTURE_GLOBAL_EXCLUDE_COLUMNS: Comma-separated column names

        Raises:
            ConfigurationError: If an operation or ordering name is unknown
        """

        def env(name: str, default: str | None = None) -> str | None:
            return os.getenv(f"{prefix}{name}", default)

        values = {
            "data_source_name": env("DATA_SOURCE"),
            "resource_location": env("RESOURCE_LOCATION"),
            "scenario_names": _split_list(env("SCENARIO_NAMES")),
            "scenario_marker": env("SCENARIO_MARKER", DEFAULT_SCENARIO_MARKER),
            "operations": OperationDefaults(
                preparation=Operation.parse(env("PREPARATION_OPERATION", "CLEAN_INSERT")),
                expectation=Operation.parse(env("EXPECTATION_OPERATION", "NONE")),
            ),
            "table_ordering": TableOrderingStrategy.parse(env("TABLE_ORDERING", "AUTO")),
            "schema": env("SCHEMA") or None,
            "global_exclude_columns": _split_list(env("GLOBAL_EXCLUDE_COLUMNS")),
        }
        values.update(overrides)

        config = cls(**values)
        logger.debug(f"Loaded configuration from environment: {config.to_dict()}")
        return config

    def load_order(self) -> list[str] | None:
        """Read the load order file from the resource location, if any."""
        if not self.resource_location:
            return None
        return read_load_order(Path(self.resource_location) / self.load_order_file_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_source_name": self.data_source_name,
            "resource_location": self.resource_location,
            "scenario_names": list(self.scenario_names),
            "scenario_marker": self.scenario_marker,
            "column_strategies": {k: str(v) for k, v in self.column_strategies.items()},
            "preparation_operation": self.operations.preparation.value,
            "expectation_operation": self.operations.expectation.value,
            "table_ordering": self.table_ordering.value,
            "schema": self.schema,
            "load_order_file_name": self.load_order_file_name,
            "global_exclude_columns": list(self.global_exclude_columns),
        }
