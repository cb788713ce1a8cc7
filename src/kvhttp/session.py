"""
Session handles for kvhttp.

``Transaction`` and ``Snapshot`` are capability tokens: an opaque id the
server knows plus the database it lives in. They cache nothing; every
operation is a round trip and all state stays on the server.

A handle is not safe to drive from several tasks at once. Use one handle
per task, or serialize access yourself.
"""

import logging
from abc import ABC, abstractmethod
from typing import IO, TYPE_CHECKING

from .cursor import Cursor
from .exceptions import InvalidArgumentError
from .protocol.messages import (
    SNAP_PREFIX,
    TX_PREFIX,
    AscendRequest,
    CommitRequest,
    CommitResponse,
    DeleteRequest,
    DeleteResponse,
    DescendRequest,
    DiscardRequest,
    DiscardResponse,
    GetRequest,
    GetResponse,
    RollbackRequest,
    RollbackResponse,
    ScanRequest,
    SetRequest,
    SetResponse,
    session_path,
)
from .types import CursorKind, Key, to_bytes

if TYPE_CHECKING:
    from .connection.base import BaseInvoker
    from .database import Database

logger = logging.getLogger(__name__)

Value = bytes | bytearray | str | IO[bytes] | IO[str]


class BaseSession(ABC):
    """
    Operations shared by transactions and snapshots: point reads and cursors.
    """

    _prefix: str

    def __init__(self, database: "Database", session_id: str):
        self._database = database
        self._id = session_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"

    @property
    def id(self) -> str:
        """The opaque session id known to the server."""
        return self._id

    @property
    def database(self) -> "Database":
        return self._database

    @property
    def _invoker(self) -> "BaseInvoker":
        return self._database.invoker

    @abstractmethod
    def _owner(self) -> dict[str, str]:
        """Request fields naming this session."""
        ...

    async def get(self, key: Key) -> bytes:
        """
        Read the value stored under a key.

        Raises:
            NotFoundError: If the key does not exist
        """
        request = GetRequest(key=to_bytes(key), **self._owner())
        response = await self._invoker.call(session_path(self._prefix, "get"), request, GetResponse)
        return response.value

    def ascend(self, begin: Key = b"", end: Key = b"", *, raise_on_error: bool = True) -> Cursor:
        """
        Cursor over keys in increasing order.

        ``begin`` is inclusive and ``end`` exclusive; an empty bound leaves
        that side of the range open.
        """
        request = AscendRequest(
            name=self._database.new_id(),
            begin=to_bytes(begin),
            end=to_bytes(end),
            **self._owner(),
        )
        return self._cursor(CursorKind.ASCEND, request, raise_on_error)

    def descend(self, begin: Key = b"", end: Key = b"", *, raise_on_error: bool = True) -> Cursor:
        """Cursor over the same range as ``ascend``, in decreasing order."""
        request = DescendRequest(
            name=self._database.new_id(),
            begin=to_bytes(begin),
            end=to_bytes(end),
            **self._owner(),
        )
        return self._cursor(CursorKind.DESCEND, request, raise_on_error)

    def scan(self, *, raise_on_error: bool = True) -> Cursor:
        """Cursor over every entry, in the server's own order."""
        request = ScanRequest(name=self._database.new_id(), **self._owner())
        return self._cursor(CursorKind.SCAN, request, raise_on_error)

    def _cursor(
        self,
        kind: CursorKind,
        request: AscendRequest | DescendRequest | ScanRequest,
        raise_on_error: bool,
    ) -> Cursor:
        path = session_path(self._prefix, kind.value)
        return Cursor(self._invoker, kind, path, request, raise_on_error=raise_on_error)


class Transaction(BaseSession):
    """
    Read-write session.

    Ended by ``commit`` or ``rollback``; afterwards the server rejects the id
    and every operation fails with ``UnknownSessionError``.
    """

    _prefix = TX_PREFIX

    def _owner(self) -> dict[str, str]:
        return {"transaction": self._id}

    async def set(self, key: Key, value: Value | None) -> None:
        """
        Create or replace the value under a key.

        File-like values are read to the end before sending; the protocol has
        no streaming writes.

        Raises:
            InvalidArgumentError: If value is None
        """
        if value is None:
            raise InvalidArgumentError("invalid argument: value is required")
        request = SetRequest(transaction=self._id, key=to_bytes(key), value=_read_value(value))
        await self._invoker.call(session_path(self._prefix, "set"), request, SetResponse)

    async def delete(self, key: Key) -> None:
        """Remove a key. Deleting a missing key is not an error."""
        request = DeleteRequest(transaction=self._id, key=to_bytes(key))
        await self._invoker.call(session_path(self._prefix, "delete"), request, DeleteResponse)

    async def commit(self) -> None:
        """Make the transaction's writes durable and end it."""
        request = CommitRequest(transaction=self._id)
        await self._invoker.call(session_path(self._prefix, "commit"), request, CommitResponse)
        logger.debug("Committed transaction %s", self._id)

    async def rollback(self) -> None:
        """Drop the transaction's writes and end it."""
        request = RollbackRequest(transaction=self._id)
        await self._invoker.call(session_path(self._prefix, "rollback"), request, RollbackResponse)
        logger.debug("Rolled back transaction %s", self._id)


class Snapshot(BaseSession):
    """
    Read-only, point-in-time session. Ended by ``discard``.
    """

    _prefix = SNAP_PREFIX

    def _owner(self) -> dict[str, str]:
        return {"snapshot": self._id}

    async def discard(self) -> None:
        """Release the snapshot on the server."""
        request = DiscardRequest(snapshot=self._id)
        await self._invoker.call(session_path(self._prefix, "discard"), request, DiscardResponse)
        logger.debug("Discarded snapshot %s", self._id)


def _read_value(value: Value) -> bytes:
    if hasattr(value, "read"):
        value = value.read()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise InvalidArgumentError(f"invalid argument: unsupported value type {type(value).__name__}")
