"""
HTTP Invoker Implementation for kvhttp.

Sends each request as a single JSON POST using httpx.
"""

import logging

import httpx

from .base import BaseInvoker
from ..exceptions import ConnectionError, TimeoutError, TransportError

logger = logging.getLogger(__name__)


class HTTPInvoker(BaseInvoker):
    """
    HTTP transport for the key-value protocol.

    Stateless: every call is an independent POST. The underlying
    ``httpx.AsyncClient`` may be shared with the rest of the application; in
    that case it is left open by ``close()``.
    """

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize HTTP invoker.

        Args:
            url: Database base URL (e.g., "http://localhost:8080/db")
            client: Optional pre-configured httpx client to send requests with
            timeout: Request timeout in seconds, used when no client is given.
                A supplied client keeps its own timeout, which ``timeout``
                then reports (None means no limit).
        """
        super().__init__(url, timeout)
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout)
        else:
            self.timeout = client.timeout.read
        self._client: httpx.AsyncClient | None = client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @property
    def is_closed(self) -> bool:
        return self._client is None

    async def close(self) -> None:
        """Close the HTTP client if this invoker created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _post(self, path: str, body: bytes) -> bytes:
        """
        Send a request via HTTP POST.

        Raises:
            ConnectionError: If closed or the server is unreachable
            TimeoutError: If the request times out
            TransportError: If the server answers with a non-200 status
        """
        if self._client is None:
            raise ConnectionError("Invoker is closed.")

        url = self.endpoint(path)
        try:
            response = await self._client.post(url, content=body, headers=self.headers)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request to {url} timed out: {e}")
        except httpx.RequestError as e:
            raise ConnectionError(f"Request to {url} failed: {e}")

        if response.status_code != httpx.codes.OK:
            logger.debug("POST %s -> %d", url, response.status_code)
            raise TransportError(
                f"Received non-ok http status {response.status_code}",
                code=response.status_code,
            )

        logger.debug("POST %s -> %d (%d bytes)", url, response.status_code, len(response.content))
        return response.content
