"""
LOB normalisation.

Character LOBs become plain strings; binary content becomes a
``[BASE64]``-prefixed string, the same marker fixtures use for binary input.
This lets live LOB contents be compared with fixture values as ordinary
strings once the cursor is closed.
"""

import base64
import io
import logging
from typing import Any

from src.utils.errors import LobConversionError

logger = logging.getLogger(__name__)

BASE64_PREFIX = "[BASE64]"

BINARY_TYPES = (bytes, bytearray, memoryview)


def encode_binary(data: bytes | bytearray | memoryview) -> str:
    """Render bytes as ``[BASE64]<base64 text>``."""
    return BASE64_PREFIX + base64.b64encode(bytes(data)).decode("ascii")


def decode_binary(text: str) -> bytes:
    """
    Decode fixture text destined for a binary column.

    ``[BASE64]``-prefixed text is Base64-decoded; anything else is taken as
    UTF-8 text.

    Raises:
        ValueError: If the Base64 payload is malformed
    """
    if text.startswith(BASE64_PREFIX):
        payload = "".join(text[len(BASE64_PREFIX):].split())
        return base64.b64decode(payload, validate=True)
    return text.encode("utf-8")


def lob_kind(value: Any) -> str:
    """Best-effort name of a LOB locator's kind: CLOB, BLOB or LOB."""
    lob_type = getattr(value, "type", None)
    type_name = str(getattr(lob_type, "name", lob_type) or "").upper()
    if "BLOB" in type_name or "BFILE" in type_name:
        return "BLOB"
    if "CLOB" in type_name:
        return "CLOB"
    if isinstance(value, io.TextIOBase):
        return "CLOB"
    if isinstance(value, (io.RawIOBase, io.BufferedIOBase)):
        return "BLOB"
    return "LOB"


class LobConverter:
    """Turns driver values into comparable, connection-independent values."""

    def to_comparable(self, value: Any) -> Any:
        """
        Normalise one value read from a result set.

        Args:
            value: Raw driver value

        Returns:
            The value with binary content rendered as ``[BASE64]`` text and
            LOB locators read into memory; other values unchanged

        Raises:
            LobConversionError: If a LOB locator cannot be read
        """
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, BINARY_TYPES):
            return encode_binary(value)
        if callable(getattr(value, "read", None)):
            content = self.read_lob(value)
            if isinstance(content, BINARY_TYPES):
                return encode_binary(content)
            return content
        return value

    def read_lob(self, lob: Any) -> str | bytes:
        """
        Read a LOB locator or stream fully.

        Raises:
            LobConversionError: If reading fails
        """
        kind = lob_kind(lob)
        try:
            content = lob.read()
        except Exception as e:
            logger.error(f"Failed to read {kind} content: {e}")
            raise LobConversionError(kind) from e

        logger.debug(f"Read {kind} content ({len(content)} {'chars' if isinstance(content, str) else 'bytes'})")
        return content
