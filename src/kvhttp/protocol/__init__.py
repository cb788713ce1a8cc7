"""
kvhttp Protocol Module.

Declares the JSON request/response bodies exchanged with the server.
"""

from .messages import (
    NEW_SNAPSHOT,
    NEW_TRANSACTION,
    NEXT,
    SNAP_PREFIX,
    TX_PREFIX,
    AscendRequest,
    AscendResponse,
    CommitRequest,
    CommitResponse,
    DeleteRequest,
    DeleteResponse,
    DescendRequest,
    DescendResponse,
    DiscardRequest,
    DiscardResponse,
    GetRequest,
    GetResponse,
    NewSnapshotRequest,
    NewSnapshotResponse,
    NewTransactionRequest,
    NewTransactionResponse,
    NextRequest,
    NextResponse,
    Response,
    RollbackRequest,
    RollbackResponse,
    ScanRequest,
    ScanResponse,
    SetRequest,
    SetResponse,
    WireModel,
    session_path,
)

__all__ = [
    # Paths
    "NEW_SNAPSHOT",
    "NEW_TRANSACTION",
    "NEXT",
    "SNAP_PREFIX",
    "TX_PREFIX",
    "session_path",
    # Base
    "WireModel",
    "Response",
    # Messages
    "AscendRequest",
    "AscendResponse",
    "CommitRequest",
    "CommitResponse",
    "DeleteRequest",
    "DeleteResponse",
    "DescendRequest",
    "DescendResponse",
    "DiscardRequest",
    "DiscardResponse",
    "GetRequest",
    "GetResponse",
    "NewSnapshotRequest",
    "NewSnapshotResponse",
    "NewTransactionRequest",
    "NewTransactionResponse",
    "NextRequest",
    "NextResponse",
    "RollbackRequest",
    "RollbackResponse",
    "ScanRequest",
    "ScanResponse",
    "SetRequest",
    "SetResponse",
]
