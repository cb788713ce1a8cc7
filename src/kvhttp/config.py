"""
Client configuration for kvhttp.

Provides an immutable configuration container, optionally read from the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable configuration for a kvhttp database client.

    Attributes:
        url: Base URL of the key-value server.
        timeout: Request timeout in seconds.
    """

    url: str = DEFAULT_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> ClientConfig:
        """
        Build a configuration from ``KVHTTP_URL`` and ``KVHTTP_TIMEOUT``.

        Raises:
            ValueError: If ``KVHTTP_TIMEOUT`` is not a positive number
        """
        url = os.getenv("KVHTTP_URL", DEFAULT_URL)
        raw_timeout = os.getenv("KVHTTP_TIMEOUT")
        if raw_timeout is None or raw_timeout == "":
            return cls(url=url)

        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"Invalid KVHTTP_TIMEOUT '{raw_timeout}'. Must be a number of seconds.")
        if timeout <= 0:
            raise ValueError(f"Invalid KVHTTP_TIMEOUT '{raw_timeout}'. Must be positive.")
        return cls(url=url, timeout=timeout)


__all__ = ["ClientConfig", "DEFAULT_TIMEOUT", "DEFAULT_URL"]
