"""
Type definitions for the kvhttp client.
"""

from enum import Enum
from typing import NamedTuple


class Entry(NamedTuple):
    """A single key-value pair produced by a cursor."""

    key: bytes
    value: bytes


class CursorState(str, Enum):
    """Lifecycle of a cursor."""

    UNOPENED = "unopened"
    OPEN = "open"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def is_done(self) -> bool:
        """Check if the cursor can produce no more entries."""
        return self in (CursorState.EXHAUSTED, CursorState.FAILED)


class CursorKind(str, Enum):
    """Ordering requested when a cursor is opened."""

    ASCEND = "ascend"
    DESCEND = "descend"
    SCAN = "scan"

    @property
    def is_bounded(self) -> bool:
        """Check if the open request carries begin/end bounds."""
        return self is not CursorKind.SCAN


Key = str | bytes


def to_bytes(key: Key) -> bytes:
    """Encode a key given as ``str`` (UTF-8) or ``bytes``."""
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)
