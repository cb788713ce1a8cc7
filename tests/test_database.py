"""Tests for the Database root."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from kvhttp import ClientConfig, CursorState, Database, Entry, Snapshot, Transaction
from kvhttp.connection import BaseInvoker
from kvhttp.protocol import GetRequest, GetResponse, NextResponse, Response
from kvhttp.exceptions import AlreadyExistsError, TransportError, UnknownSessionError
from kvhttp.testing import MemoryKVServer

from tests.conftest import MEMORY_URL, SequentialIds


class TestDatabaseInit:
    """Construction performs validation only."""

    def test_normalizes_url(self) -> None:
        """Only scheme, host and base path are kept."""
        db = Database("http://user:pw@localhost:8080/db/?debug=1")
        assert db.server_url == "http://localhost:8080/db"

    def test_invalid_url(self) -> None:
        """Invalid URLs are rejected up front."""
        with pytest.raises(ValueError, match="Invalid URL"):
            Database("ftp://localhost")

    def test_no_network_call(self, server: MemoryKVServer) -> None:
        """Creating a client sends nothing."""
        Database(MEMORY_URL, server.client())
        assert server.requests == []

    def test_from_config(self) -> None:
        """Config values are applied."""
        db = Database.from_config(ClientConfig(url="http://kv.test/db", timeout=3.0))
        assert db.server_url == "http://kv.test/db"
        assert db.invoker.timeout == 3.0

    def test_default_ids_are_unique(self) -> None:
        """The default id factory yields distinct uuids."""
        db = Database("http://kv.test")
        ids = {db.new_id() for _ in range(100)}
        assert len(ids) == 100
        assert all(len(i) == 36 for i in ids)

    def test_repr(self) -> None:
        """repr shows the endpoint."""
        assert repr(Database("http://kv.test/db")) == "Database(url='http://kv.test/db')"


class TestBeginSessions:
    """Tests for begin_transaction and begin_snapshot."""

    @pytest.mark.asyncio
    async def test_begin_transaction(self, db: Database, server: MemoryKVServer) -> None:
        """A transaction is registered under a client chosen id."""
        tx = await db.begin_transaction()

        assert isinstance(tx, Transaction)
        assert tx.id == "id-1"
        assert tx.database is db
        assert server.paths() == ["/new-transaction"]
        assert server.requests[0].body.name == "id-1"  # type: ignore[attr-defined]
        assert server.open_transactions == ["id-1"]

    @pytest.mark.asyncio
    async def test_begin_snapshot(self, db: Database, server: MemoryKVServer) -> None:
        """A snapshot is registered under a client chosen id."""
        snap = await db.begin_snapshot()

        assert isinstance(snap, Snapshot)
        assert snap.id == "id-1"
        assert server.paths() == ["/new-snapshot"]
        assert server.open_snapshots == ["id-1"]

    @pytest.mark.asyncio
    async def test_rejected_id(self, server: MemoryKVServer) -> None:
        """A colliding id is reported as a domain error."""
        async with Database(MEMORY_URL, server.client(), id_factory=lambda: "same") as db:
            await db.begin_transaction()
            with pytest.raises(AlreadyExistsError):
                await db.begin_snapshot()

    @pytest.mark.asyncio
    async def test_unreachable(self, db: Database, server: MemoryKVServer) -> None:
        """Transport failures surface from begin."""
        server.fail_next(502)
        with pytest.raises(TransportError) as exc_info:
            await db.begin_transaction()
        assert exc_info.value.code == 502
        assert server.open_transactions == []


class TestClose:
    """close() only releases local resources."""

    @pytest.mark.asyncio
    async def test_close_leaves_sessions_open(self, server: MemoryKVServer) -> None:
        """Open sessions survive closing the client."""
        client = server.client()
        db = Database(MEMORY_URL, client)
        await db.begin_transaction()
        await db.close()

        assert len(server.open_transactions) == 1
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_closed_database_cannot_begin(self) -> None:
        """A closed database refuses new sessions."""
        db = Database("http://kv.test")
        await db.close()
        with pytest.raises(TransportError, match="closed"):
            await db.begin_transaction()


class TestScopedSessions:
    """Tests for the transaction() and snapshot() context managers."""

    @pytest.mark.asyncio
    async def test_transaction_commits(self, db: Database, server: MemoryKVServer) -> None:
        """Normal exit commits."""
        async with db.transaction() as tx:
            await tx.set("a", "1")

        assert server.store == {b"a": b"1"}
        assert server.paths()[-1] == "/tx/commit"
        assert server.open_transactions == []

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, db: Database, server: MemoryKVServer) -> None:
        """An exception rolls back and propagates."""
        with pytest.raises(RuntimeError, match="boom"):
            async with db.transaction() as tx:
                await tx.set("a", "1")
                raise RuntimeError("boom")

        assert server.store == {}
        assert server.paths()[-1] == "/tx/rollback"
        assert server.open_transactions == []

    @pytest.mark.asyncio
    async def test_failed_rollback_keeps_original_error(
        self, db: Database, server: MemoryKVServer, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The body's exception wins over a failing rollback."""
        with pytest.raises(RuntimeError, match="boom"):
            async with db.transaction():
                server.fail_next(500)
                raise RuntimeError("boom")

        assert "Rollback of transaction id-1 failed" in caplog.text

    @pytest.mark.asyncio
    async def test_commit_failure_propagates(self, db: Database) -> None:
        """A session ended inside the block makes the commit fail."""
        with pytest.raises(UnknownSessionError):
            async with db.transaction() as tx:
                await tx.rollback()

    @pytest.mark.asyncio
    async def test_snapshot_discards(self, db: Database, server: MemoryKVServer) -> None:
        """Snapshots are discarded on exit."""
        async with db.snapshot() as snap:
            assert server.open_snapshots == [snap.id]

        assert server.paths()[-1] == "/snap/discard"
        assert server.open_snapshots == []

    @pytest.mark.asyncio
    async def test_snapshot_discards_on_error(self, db: Database, server: MemoryKVServer) -> None:
        """Snapshots are discarded when the body raises."""
        with pytest.raises(KeyError):
            async with db.snapshot():
                raise KeyError("x")

        assert server.open_snapshots == []


class TestSharedClient:
    """A caller supplied httpx client is used as is."""

    @pytest.mark.asyncio
    async def test_custom_headers_reach_server(self) -> None:
        """Client level headers are sent with every request."""
        server = MemoryKVServer()
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("x-tenant", ""))
            return server.handle(request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), headers={"X-Tenant": "t1"}) as client:
            db = Database("http://kv.test", client, id_factory=SequentialIds())
            await db.begin_snapshot()

        assert seen == ["t1"]


class TestCustomInvoker:
    """A Database can run over any BaseInvoker."""

    @pytest.fixture
    def mock_invoker(self) -> MagicMock:
        """An invoker double answering from canned responses."""
        invoker = MagicMock(spec=BaseInvoker)
        invoker.url = "http://custom.test"
        invoker.close = AsyncMock()
        replies = iter([NextResponse(key=b"a", value=b"1"), NextResponse()])

        def answer(path: str, request: object, response_type: type) -> Response:
            if path == "/snap/get":
                return GetResponse(value=b"v")
            if path == "/it/next":
                return next(replies)
            return response_type()

        invoker.call = AsyncMock(side_effect=answer)
        return invoker

    @pytest.mark.asyncio
    async def test_begin_get_and_cursor(self, mock_invoker: MagicMock) -> None:
        """Sessions and cursors go through the supplied invoker."""
        async with Database("http://ignored.test", invoker=mock_invoker, id_factory=SequentialIds()) as db:
            assert db.invoker is mock_invoker
            assert db.server_url == "http://custom.test"

            snap = await db.begin_snapshot()
            assert await snap.get("k") == b"v"

            cursor = snap.ascend()
            assert await cursor.collect() == [Entry(b"a", b"1")]
            assert cursor.state is CursorState.EXHAUSTED

        paths = [c.args[0] for c in mock_invoker.call.await_args_list]
        assert paths == ["/new-snapshot", "/snap/get", "/snap/ascend", "/it/next", "/it/next"]
        get_request = mock_invoker.call.await_args_list[1].args[1]
        assert get_request == GetRequest(snapshot="id-1", key=b"k")
        mock_invoker.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invoker_errors_reach_caller(self, mock_invoker: MagicMock) -> None:
        """Errors raised by the invoker propagate unchanged."""
        mock_invoker.call.side_effect = UnknownSessionError("unknown snapshot s")
        db = Database("http://ignored.test", invoker=mock_invoker)
        with pytest.raises(UnknownSessionError):
            await db.begin_snapshot()
