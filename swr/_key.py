"""
Key resolution.

Key functions may raise, typically when they build a key out of another
query's data that is not loaded yet. That simply means "not ready": the
key resolves to None and every operation on it is a no-op.
"""

from __future__ import annotations

import logging

from swr._types import InfiniteKeySpec, KeySpec, ResolvedKey

logger = logging.getLogger("swr.key")


def resolve_key(key: KeySpec) -> ResolvedKey | None:
    """
    Resolve a key spec into a string, or None.

    Example:
        resolve_key("/api/user")                      # "/api/user"
        resolve_key(lambda: f"/api/posts/{user.id}")  # None while user is None
    """
    if callable(key):
        try:
            resolved = key()
        except Exception as e:
            logger.debug(f"Key function raised, treating as no key: {e!r}")
            return None
        return resolved or None
    return key or None


def resolve_infinite_key[D](
    key: InfiniteKeySpec[D],
    page: int,
    previous: D | None,
) -> ResolvedKey | None:
    """Resolve the key of `page`, given the data of the page before it."""
    if callable(key):
        try:
            resolved = key(page, previous)
        except Exception as e:
            logger.debug(f"Key function raised for page {page}, treating as no key: {e!r}")
            return None
        return resolved or None
    return key or None


__all__ = ("resolve_key", "resolve_infinite_key")
