"""
Structured logging for fixture preparation and verification.

Library modules log through ``logging.getLogger(__name__)``; applications and
test sessions opt into formatting with ``setup_logging`` or
``configure_from_env``.

Usage:
    from src.utils.logging import setup_logging, ContextLogger

    setup_logging(level="DEBUG", json_format=True)

    log = ContextLogger(__name__, operation="CLEAN_INSERT")
    log.bind(table="ORDERS").info("Inserted rows", rows=3)
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
