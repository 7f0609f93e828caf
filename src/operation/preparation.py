"""
Fixture preparation: apply a data set to a database before a test.
"""

import logging
from typing import Any

from src.dataset.config import Configuration
from src.dataset.enums import Operation
from src.dataset.model import DataSet
from src.operation.executor import OperationExecutor
from src.ordering.resolver import TableOrderResolver

logger = logging.getLogger(__name__)


def prepare(
    data_set: DataSet,
    connection: Any,
    configuration: Configuration | None = None,
    operation: Operation | str | None = None,
    executor: OperationExecutor | None = None,
    resolver: TableOrderResolver | None = None,
) -> None:
    """
    Write a data set to the database.

    Rows are filtered to the configured scenarios, tables are ordered with
    the configured strategy (using the load order file from the resource
    location when present), then the preparation operation runs.

    Args:
        data_set: Fixture data
        connection: DB-API connection
        configuration: Settings; defaults when None
        operation: Overrides the configured preparation operation

    Raises:
        DatabaseOperationError: If the operation fails and was rolled back
    """
    configuration = configuration or Configuration()
    operation = Operation.parse(operation or configuration.operations.preparation)

    filtered = data_set.filter_scenarios(configuration.scenario_names, configuration.scenario_marker)
    ordered = (resolver or TableOrderResolver()).resolve_order(
        list(filtered),
        connection,
        schema=configuration.schema,
        strategy=configuration.table_ordering,
        load_order=configuration.load_order(),
    )

    logger.info(f"Preparing {len(ordered)} table(s) with {operation.value}")
    (executor or OperationExecutor()).execute(operation, ordered, connection)
