"""
Pytest configuration for kvhttp tests.

Unit tests run against ``MemoryKVServer`` through httpx's mock transport.
Integration tests (marker ``integration``) need a real server at
``KVHTTP_URL`` and are skipped when it does not answer.

Shared connection constants are defined here so every test file can import
them instead of hardcoding URLs.
"""

import os
import socket
from collections.abc import AsyncGenerator, Iterator
from urllib.parse import urlsplit

import pytest

from kvhttp import Database
from kvhttp.testing import MemoryKVServer

# ---------------------------------------------------------------------------
# Shared connection constants (import these in test files)
# ---------------------------------------------------------------------------
MEMORY_URL = "http://kv.test/db"
KVHTTP_URL = os.getenv("KVHTTP_URL", "http://localhost:8080")


def is_port_responding(url: str = KVHTTP_URL) -> bool:
    """Check if the key-value server port is responding (basic TCP check)."""
    parts = urlsplit(url)
    port = parts.port or (443 if parts.scheme == "https" else 80)
    try:
        with socket.create_connection((parts.hostname or "localhost", port), timeout=2):
            return True
    except OSError:
        return False


class SequentialIds:
    """Predictable id factory: ``id-1``, ``id-2``, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture
def server() -> MemoryKVServer:
    """An empty in-memory server mounted under /db."""
    return MemoryKVServer(base_path="/db")


@pytest.fixture
async def db(server: MemoryKVServer) -> AsyncGenerator[Database, None]:
    """A database client wired to the in-memory server."""
    client = server.client()
    database = Database(MEMORY_URL, client, id_factory=SequentialIds())
    try:
        yield database
    finally:
        await database.close()
        await client.aclose()


@pytest.fixture(scope="session")
def server_available() -> Iterator[bool]:
    """Session-scoped flag telling whether a real server answers at KVHTTP_URL."""
    yield is_port_responding()
