"""
Database root for kvhttp.

``Database`` owns the endpoint and the transport, and hands out sessions.
"""

import logging
import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Self

import httpx

from .config import ClientConfig
from .connection.base import BaseInvoker
from .connection.http import HTTPInvoker
from .protocol.messages import (
    NEW_SNAPSHOT,
    NEW_TRANSACTION,
    NewSnapshotRequest,
    NewSnapshotResponse,
    NewTransactionRequest,
    NewTransactionResponse,
)
from .session import Snapshot, Transaction

logger = logging.getLogger(__name__)


def _uuid4() -> str:
    return str(uuid.uuid4())


class Database:
    """
    Client for one remote key-value database.

    Creating a ``Database`` performs no network call. Sessions are begun
    explicitly and must be ended explicitly; ``close()`` only releases local
    resources, so a session that is never committed, rolled back or
    discarded lives on the server until the server expires it.

    Usage:
        async with Database("http://localhost:8080/db") as db:
            async with db.transaction() as tx:
                await tx.set("a", b"1")

            async with db.snapshot() as snap:
                async for key, value in snap.ascend():
                    print(key, value)
    """

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
        id_factory: Callable[[], str] | None = None,
        invoker: BaseInvoker | None = None,
    ):
        """
        Initialize the database client.

        Args:
            url: Database base URL; only scheme, host and path are kept
            client: Optional shared httpx client (left open on close)
            timeout: Request timeout in seconds; ignored when a client is
                given, whose own timeout is used instead
            id_factory: Source of unique session and cursor ids
            invoker: Custom transport; when given, ``url``, ``client`` and
                ``timeout`` are not used

        Raises:
            ValueError: If the URL is not a valid http(s) URL
        """
        self._invoker = invoker if invoker is not None else HTTPInvoker(url, client=client, timeout=timeout)
        self._id_factory = id_factory or _uuid4

    @classmethod
    def from_config(cls, config: ClientConfig, client: httpx.AsyncClient | None = None) -> "Database":
        """Create a database client from a ``ClientConfig``."""
        return cls(config.url, client, timeout=config.timeout)

    def __repr__(self) -> str:
        return f"Database(url={self.server_url!r})"

    @property
    def server_url(self) -> str:
        """Normalized base URL of the server."""
        return self._invoker.url

    @property
    def invoker(self) -> BaseInvoker:
        return self._invoker

    def new_id(self) -> str:
        """Generate a fresh id for a session or cursor."""
        return self._id_factory()

    async def close(self) -> None:
        """Release local resources. Open server-side sessions are untouched."""
        await self._invoker.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def begin_transaction(self) -> Transaction:
        """
        Start a read-write transaction.

        Raises:
            DomainError: If the server rejects the new session
            TransportError: If the server is unreachable
        """
        name = self.new_id()
        await self._invoker.call(NEW_TRANSACTION, NewTransactionRequest(name=name), NewTransactionResponse)
        logger.debug("Began transaction %s", name)
        return Transaction(self, name)

    async def begin_snapshot(self) -> Snapshot:
        """Start a read-only snapshot. Fails like ``begin_transaction``."""
        name = self.new_id()
        await self._invoker.call(NEW_SNAPSHOT, NewSnapshotRequest(name=name), NewSnapshotResponse)
        logger.debug("Began snapshot %s", name)
        return Snapshot(self, name)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """
        Transaction scoped to a block.

        Commits when the block finishes normally and rolls back when it
        raises. If the rollback itself fails, the block's exception is the one
        propagated.
        """
        tx = await self.begin_transaction()
        try:
            yield tx
        except BaseException:
            try:
                await tx.rollback()
            except Exception as rollback_error:
                logger.warning("Rollback of transaction %s failed: %s", tx.id, rollback_error)
            raise
        await tx.commit()

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[Snapshot]:
        """Snapshot scoped to a block; discarded on exit."""
        snap = await self.begin_snapshot()
        try:
            yield snap
        except BaseException:
            try:
                await snap.discard()
            except Exception as discard_error:
                logger.warning("Discard of snapshot %s failed: %s", snap.id, discard_error)
            raise
        await snap.discard()
