"""
Testing utilities for kvhttp.

Provides an in-memory server speaking the wire protocol, for unit tests that
should not need a running key-value server.
"""

from .server import MemoryKVServer, RecordedRequest, ServerError

__all__ = [
    "MemoryKVServer",
    "RecordedRequest",
    "ServerError",
]
