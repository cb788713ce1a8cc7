"""
Base Invoker Interface for kvhttp.

Defines the request/response contract every transport must implement and
the shared decoding and error classification on top of it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Self
from urllib.parse import urlsplit, urlunsplit

from pydantic import ValidationError

from ..exceptions import ProtocolError, error_from_string
from ..protocol.messages import ResponseT, WireModel

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """
    Reduce a database URL to scheme, host and base path.

    Credentials, query string and fragment are dropped and the trailing
    slash is removed.

    Raises:
        ValueError: If the scheme is not http(s) or the host is missing
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ValueError(f"Invalid URL scheme '{parts.scheme}'. Must be 'http' or 'https'.")

    host = parts.hostname
    if not host:
        raise ValueError(f"Invalid URL '{url}': missing host.")
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    netloc = f"{host}:{port}" if port is not None else host

    return urlunsplit((scheme, netloc, parts.path.rstrip("/"), "", ""))


class BaseInvoker(ABC):
    """
    Abstract base class for transport invokers.

    An invoker sends one request body to one path below the database URL and
    returns the raw response body. ``call`` layers encoding, decoding and
    application error translation on top.
    """

    def __init__(self, url: str, timeout: float = 30.0):
        """
        Initialize invoker parameters.

        Args:
            url: Database base URL
            timeout: Request timeout in seconds
        """
        self.url = normalize_url(url)
        self.timeout: float | None = timeout

    def endpoint(self, path: str) -> str:
        """Full URL of an endpoint path."""
        return self.url + path

    @abstractmethod
    async def close(self) -> None:
        """Release local resources."""
        ...

    @abstractmethod
    async def _post(self, path: str, body: bytes) -> bytes:
        """
        POST an encoded body and return the response body.

        Implementations raise ``TransportError`` (or a subclass) for any
        failure below the application layer.
        """
        ...

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def call(self, path: str, request: WireModel, response_type: type[ResponseT]) -> ResponseT:
        """
        Execute one round trip.

        Args:
            path: Endpoint path, e.g. ``/tx/get``
            request: Request message
            response_type: Expected response message class

        Returns:
            The decoded response, guaranteed to carry no error text

        Raises:
            TransportError: If the HTTP exchange fails
            ProtocolError: If the response body cannot be decoded
            DomainError: If the server reports an error
        """
        content = await self._post(path, request.to_json())

        try:
            response = response_type.model_validate_json(content)
        except ValidationError as e:
            logger.debug("Undecodable response from %s: %s", path, e)
            raise ProtocolError(f"Invalid {response_type.__name__} from {path}: {e}") from e

        if response.is_error:
            logger.debug("Server error from %s: %s", path, response.error)
            raise error_from_string(response.error)
        return response
