"""
kvhttp Connection Module.

Provides the transport invoker used by every client operation.
"""

from .base import BaseInvoker, normalize_url
from .http import HTTPInvoker

__all__ = [
    "BaseInvoker",
    "HTTPInvoker",
    "normalize_url",
]
