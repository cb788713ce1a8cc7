"""
kvhttp Command Line Interface.

Provides one-shot commands against a key-value server:
- get: Read one key
- set: Write one key
- delete: Remove one key
- ascend / descend: List a key range in order
- scan: List every entry
"""

from .commands import cli, main

__all__ = ["cli", "main"]
