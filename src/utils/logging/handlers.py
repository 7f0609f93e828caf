"""
Logger wrapper carrying fixed context into every record.
"""

import logging
from typing import Any


class ContextLogger:
    """
    Logger wrapper that adds contextual fields to all log messages.

    Usage:
        log = ContextLogger(__name__, operation="INSERT")
        log.bind(table="USERS").debug("Batch sent", rows=10)
    """

    def __init__(self, name: str, **context: Any):
        self.logger = logging.getLogger(name)
        self.context = context

    def bind(self, **context: Any) -> "ContextLogger":
        """Return a new ContextLogger with extra context merged in."""
        child = ContextLogger(self.logger.name, **self.context)
        child.context.update(context)
        return child

    def _log(self, level: int, msg: str, *args, exc_info=None, **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra={**self.context, **kwargs},
            stacklevel=3,
        )

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def get_context(self) -> dict[str, Any]:
        """Return a copy of the bound context."""
        return dict(self.context)
