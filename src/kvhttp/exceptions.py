"""
kvhttp Exceptions.

Custom exception hierarchy for the client.

The server only reports application failures as free text, so the domain
error subclasses are chosen by inspecting that text (see ``error_from_string``).
"""


class KVHTTPError(Exception):
    """Base exception for all kvhttp client errors."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class TransportError(KVHTTPError):
    """Raised when the HTTP round trip itself fails.

    ``code`` holds the HTTP status when the server answered with a
    non-success status; it is ``None`` for network level failures.
    """

    pass


class ConnectionError(TransportError):
    """Raised when the server cannot be reached."""

    pass


class TimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""

    pass


class ProtocolError(KVHTTPError):
    """Raised when a response body does not match the expected shape.

    Usually means the client and server speak different protocol versions.
    """

    pass


class DomainError(KVHTTPError):
    """Raised when the server reports an application level error."""

    _PATTERNS: tuple[str, ...] = ()

    @classmethod
    def matches(cls, text: str) -> bool:
        """Check if a server error message belongs to this error kind."""
        msg = text.lower()
        return any(p in msg for p in cls._PATTERNS)


class UnknownSessionError(DomainError):
    """Raised when a transaction or snapshot id is not known to the server.

    This is what operations on a committed, rolled back or discarded
    session report.
    """

    _PATTERNS = (
        "unknown transaction",
        "unknown snapshot",
        "unknown session",
        "transaction not found",
        "snapshot not found",
        "session not found",
    )


class UnknownCursorError(DomainError):
    """Raised when a cursor (iterator) id is not known to the server."""

    _PATTERNS = (
        "unknown iterator",
        "unknown cursor",
        "iterator not found",
        "cursor not found",
    )


class AlreadyExistsError(DomainError):
    """Raised when the server rejects a client generated id as a duplicate."""

    _PATTERNS = ("already exists",)


class NotFoundError(DomainError):
    """Raised when a key does not exist."""

    _PATTERNS = ("does not exist", "not found")


class InvalidArgumentError(DomainError):
    """Raised when a request argument is rejected."""

    _PATTERNS = ("invalid argument",)


# Checked in order, most specific first: "unknown transaction" must not be
# mistaken for a missing key.
_DOMAIN_ERRORS: tuple[type[DomainError], ...] = (
    UnknownSessionError,
    UnknownCursorError,
    AlreadyExistsError,
    NotFoundError,
    InvalidArgumentError,
)


def error_from_string(text: str) -> DomainError:
    """Build the most specific domain error for a server error message."""
    for error_class in _DOMAIN_ERRORS:
        if error_class.matches(text):
            return error_class(text)
    return DomainError(text)
