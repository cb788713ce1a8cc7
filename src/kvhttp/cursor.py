"""
Cursor protocol for kvhttp.

A cursor is iteration state that lives on the server under a client chosen
id. It is registered by one open call (ascend, descend or scan) and drained
one entry per ``/it/next`` call until the server answers with an empty key.
``Cursor`` exposes that exchange as an async iterator of ``Entry`` values.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from .exceptions import KVHTTPError
from .protocol.messages import (
    NEXT,
    AscendRequest,
    DescendRequest,
    NextRequest,
    NextResponse,
    Response,
    ResponseT,
    ScanRequest,
    WireModel,
)
from .types import CursorKind, CursorState, Entry

if TYPE_CHECKING:
    from .connection.base import BaseInvoker

logger = logging.getLogger(__name__)

OpenRequest = AscendRequest | DescendRequest | ScanRequest


class Cursor:
    """
    Forward-only, single-pass sequence of entries backed by a server cursor.

    Nothing is sent until iteration starts. Breaking out of the loop early is
    fine: no close request exists, the server reclaims abandoned cursors on
    its own. To iterate again, ask the session for a new cursor.

    Errors are always recorded in ``error``. By default the failing step also
    raises; with ``raise_on_error=False`` the loop simply ends and the caller
    checks afterwards:

        cursor = tx.ascend("a", "m", raise_on_error=False)
        async for key, value in cursor:
            ...
        cursor.check()

    A cursor must be driven by one task at a time.
    """

    def __init__(
        self,
        invoker: "BaseInvoker",
        kind: CursorKind,
        path: str,
        request: OpenRequest,
        raise_on_error: bool = True,
    ):
        self._invoker = invoker
        self._kind = kind
        self._path = path
        self._request = request
        self._raise_on_error = raise_on_error
        self._state = CursorState.UNOPENED
        self._error: KVHTTPError | None = None

    def __repr__(self) -> str:
        return f"Cursor(kind={self._kind.value}, id={self.id!r}, state={self._state.value})"

    @property
    def id(self) -> str:
        """The cursor id sent to the server."""
        return self._request.name

    @property
    def kind(self) -> CursorKind:
        return self._kind

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def error(self) -> KVHTTPError | None:
        """The error that ended iteration, if any."""
        return self._error

    def check(self) -> None:
        """Raise the recorded error, if any."""
        if self._error is not None:
            raise self._error

    def __aiter__(self) -> "Cursor":
        return self

    async def __anext__(self) -> Entry:
        if self._state is CursorState.UNOPENED:
            await self._open()
        if self._state.is_done:
            raise StopAsyncIteration

        response = await self._round_trip(NEXT, NextRequest(iterator=self.id), NextResponse)
        if response.is_eof:
            self._state = CursorState.EXHAUSTED
            logger.debug("Cursor %s exhausted", self.id)
            raise StopAsyncIteration
        return Entry(response.key, response.value)

    async def collect(self) -> list[Entry]:
        """Drain the cursor into a list."""
        return [entry async for entry in self]

    async def _open(self) -> None:
        await self._round_trip(self._path, self._request, Response)
        self._state = CursorState.OPEN
        logger.debug("Opened %s cursor %s", self._kind.value, self.id)

    async def _round_trip(self, path: str, request: WireModel, response_type: type[ResponseT]) -> ResponseT:
        try:
            return await self._invoker.call(path, request, response_type)
        except KVHTTPError as e:
            self._state = CursorState.FAILED
            self._error = e
            logger.debug("Cursor %s failed on %s: %s", self.id, path, e)
            if self._raise_on_error:
                raise
            raise StopAsyncIteration from e
        except asyncio.CancelledError:
            self._state = CursorState.FAILED
            raise
