"""
Load order files.

A load order file lists one table name per line in the order tables should
be written. Blank lines and lines starting with ``#`` are ignored.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOAD_ORDER_FILE_NAME = "load-order.txt"


def parse_load_order(text: str) -> list[str]:
    """Parse load order file content into table names."""
    names = []
    for line in text.splitlines():
        name = line.strip()
        if name and not name.startswith("#"):
            names.append(name)
    return names


def read_load_order(path: str | Path) -> list[str] | None:
    """
    Read a load order file.

    Args:
        path: File path, or a directory containing ``load-order.txt``

    Returns:
        Table names in file order, or None when the file does not exist
    """
    path = Path(path)
    if path.is_dir():
        path = path / LOAD_ORDER_FILE_NAME

    if not path.is_file():
        logger.debug(f"No load order file at {path}")
        return None

    names = parse_load_order(path.read_text(encoding="utf-8"))
    logger.debug(f"Read load order from {path}: {names}")
    return names
