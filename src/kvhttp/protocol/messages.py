"""
kvhttp wire messages.

Request and response bodies for every endpoint, declared as pydantic models.
Field names are serialized in the server's spelling (``Transaction``,
``Key``, ...) and byte strings travel as standard base64 text.
"""

import base64
import binascii
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, PlainValidator, ValidationInfo
from pydantic.alias_generators import to_pascal

# Endpoint paths, relative to the database base path.
NEW_TRANSACTION = "/new-transaction"
NEW_SNAPSHOT = "/new-snapshot"
NEXT = "/it/next"
TX_PREFIX = "tx"
SNAP_PREFIX = "snap"


def session_path(prefix: str, operation: str) -> str:
    """Build a per-session endpoint path, e.g. ``/tx/get``."""
    return f"/{prefix}/{operation}"


def _decode_bytes(value: Any, info: ValidationInfo) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    # Base64 text is accepted from JSON only.
    if isinstance(value, str) and info.mode == "json":
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 data: {e}") from e
    raise ValueError(f"expected bytes, got {type(value).__name__}")


def _encode_bytes(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


WireBytes = Annotated[
    bytes,
    PlainValidator(_decode_bytes),
    PlainSerializer(_encode_bytes, return_type=str),
]

# A JSON null error reads the same as no error.
WireError = Annotated[str, BeforeValidator(lambda v: "" if v is None else v)]


class WireModel(BaseModel):
    """Base class for all wire messages."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def to_json(self) -> bytes:
        """Serialize with the server's field names."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


class Response(WireModel):
    """Common part of every response: the application error text."""

    error: WireError = ""

    @property
    def is_error(self) -> bool:
        return bool(self.error)


ResponseT = TypeVar("ResponseT", bound=Response)


# Session creation


class NewTransactionRequest(WireModel):
    name: str


class NewTransactionResponse(Response):
    pass


class NewSnapshotRequest(WireModel):
    name: str


class NewSnapshotResponse(Response):
    pass


# Point operations


class GetRequest(WireModel):
    """Exactly one of ``transaction`` or ``snapshot`` is set."""

    transaction: str = ""
    snapshot: str = ""
    key: WireBytes = b""


class GetResponse(Response):
    value: WireBytes = b""


class SetRequest(WireModel):
    transaction: str
    key: WireBytes = b""
    value: WireBytes = b""


class SetResponse(Response):
    pass


class DeleteRequest(WireModel):
    transaction: str
    key: WireBytes = b""


class DeleteResponse(Response):
    pass


# Cursors


class AscendRequest(WireModel):
    transaction: str = ""
    snapshot: str = ""
    begin: WireBytes = b""
    end: WireBytes = b""
    name: str


class AscendResponse(Response):
    pass


class DescendRequest(WireModel):
    transaction: str = ""
    snapshot: str = ""
    begin: WireBytes = b""
    end: WireBytes = b""
    name: str


class DescendResponse(Response):
    pass


class ScanRequest(WireModel):
    transaction: str = ""
    snapshot: str = ""
    name: str


class ScanResponse(Response):
    pass


class NextRequest(WireModel):
    iterator: str


class NextResponse(Response):
    """An empty ``key`` marks the end of the cursor."""

    key: WireBytes = b""
    value: WireBytes = b""

    @property
    def is_eof(self) -> bool:
        return not self.key


# Session completion


class CommitRequest(WireModel):
    transaction: str


class CommitResponse(Response):
    pass


class RollbackRequest(WireModel):
    transaction: str


class RollbackResponse(Response):
    pass


class DiscardRequest(WireModel):
    snapshot: str


class DiscardResponse(Response):
    pass
