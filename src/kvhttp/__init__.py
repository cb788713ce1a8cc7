"""
kvhttp - Python client for a transactional key-value store over HTTP.

Supports:
- Transactions (read-write, committed or rolled back)
- Snapshots (read-only, point-in-time)
- Point reads, writes and deletes
- Ordered range cursors (ascend, descend, scan) as async iterators

Usage:
    async with Database("http://localhost:8080/db") as db:
        async with db.transaction() as tx:
            await tx.set("a", "1")
            await tx.set("b", "2")

        async with db.snapshot() as snap:
            async for key, value in snap.ascend():
                print(key, value)
"""

from .config import ClientConfig
from .connection.base import BaseInvoker
from .connection.http import HTTPInvoker
from .cursor import Cursor
from .database import Database
from .exceptions import (
    AlreadyExistsError,
    ConnectionError,
    DomainError,
    InvalidArgumentError,
    KVHTTPError,
    NotFoundError,
    ProtocolError,
    TimeoutError,
    TransportError,
    UnknownCursorError,
    UnknownSessionError,
    error_from_string,
)
from .session import BaseSession, Snapshot, Transaction
from .types import CursorKind, CursorState, Entry

__version__ = "0.1.0"
__all__ = [
    # Client
    "Database",
    "ClientConfig",
    # Sessions
    "BaseSession",
    "Transaction",
    "Snapshot",
    # Cursors
    "Cursor",
    "CursorKind",
    "CursorState",
    "Entry",
    # Transport
    "BaseInvoker",
    "HTTPInvoker",
    # Exceptions
    "KVHTTPError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "ProtocolError",
    "DomainError",
    "UnknownSessionError",
    "UnknownCursorError",
    "AlreadyExistsError",
    "NotFoundError",
    "InvalidArgumentError",
    "error_from_string",
]
