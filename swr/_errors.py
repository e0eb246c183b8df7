"""
Library exceptions.

Fetch failures are never raised by the engine; they travel on the error
channel as whatever the fetcher raised. These types only cover misuse.
"""

from __future__ import annotations


class SWRError(Exception):
    """Base class for swr exceptions."""


class MissingKeyError(SWRError, KeyError):
    """
    Cache.get() was called for a key that is not stored.

    Note: Callers are expected to check has() first.
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key not in cache: {self.key!r}"


__all__ = ("SWRError", "MissingKeyError")
