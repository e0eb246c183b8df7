"""
Core type aliases for swr.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

# ═══════════════════════════════════════════════════════════════════════════════
# Keys
# ═══════════════════════════════════════════════════════════════════════════════

type ResolvedKey = str
"""Concrete string identifying a cache entry."""

type KeySpec = ResolvedKey | Callable[[], ResolvedKey | None] | None
"""A literal key, a (possibly raising) key function, or no key at all."""

type InfiniteKeySpec[D] = ResolvedKey | Callable[[int, D | None], ResolvedKey | None] | None
"""Key spec for paginated data: called with (page index, previous page)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Fetching & Listening
# ═══════════════════════════════════════════════════════════════════════════════

type Fetcher[D] = Callable[[ResolvedKey], Awaitable[D]]
"""Loads the data behind a resolved key."""

type Listener[T] = Callable[[T], object]
"""Receives a broadcast payload."""

type Unsubscribe = Callable[[], None]
"""Cancels a subscription. Calling it twice is harmless."""

type StateFn[D] = Callable[[D | None], D | None]
"""Derives a new value from the current cached one."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ResolvedKey",
    "KeySpec",
    "InfiniteKeySpec",
    "Fetcher",
    "Listener",
    "Unsubscribe",
    "StateFn",
)
