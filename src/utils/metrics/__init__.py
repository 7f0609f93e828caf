"""
Prometheus metric helpers.

Fixture modules declare their counters at import time; test sessions import
them repeatedly, so registration goes through ``get_or_create_metric``.

Usage:
    from prometheus_client import Counter
    from src.utils.metrics import get_or_create_metric

    OPERATIONS = get_or_create_metric(
        lambda: Counter("dbfixture_operations_total", "Operations run", ["operation"]),
        "dbfixture_operations_total",
    )
"""

import logging
from typing import Callable, TypeVar

from prometheus_client import REGISTRY, CollectorRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a metric, or return the one already registered under ``metric_name``.

    Args:
        metric_factory: Callable creating the metric (e.g. ``lambda: Counter(...)``)
        metric_name: Registered name, used for lookup on duplicate registration
        registry: Prometheus registry the factory registers into

    Returns:
        The new or existing metric

    Raises:
        ValueError: If registration fails and no metric of that name exists
    """
    try:
        return metric_factory()
    except ValueError:
        # Counters register both "name" and "name_total"; either spelling resolves
        existing = registry._names_to_collectors.get(metric_name)
        if existing is None and metric_name.endswith("_total"):
            existing = registry._names_to_collectors.get(metric_name[: -len("_total")])
        if existing is not None:
            logger.debug(f"Reusing registered metric {metric_name}")
            return existing
        raise


__all__ = ["get_or_create_metric"]
