"""
Cache store — keyed items plus the data channel that announces them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from swr._channel import Channel
from swr._errors import MissingKeyError
from swr._item import CacheItem, Pending, Settled
from swr._options import DEFAULT_CLEAR_OPTIONS, ClearOptions, merge
from swr._types import Listener, ResolvedKey, Unsubscribe

logger = logging.getLogger("swr.cache")

# ═══════════════════════════════════════════════════════════════════════════════
# Cache Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Cache(Protocol):
    """
    Cache store protocol.

    Implement this to back the engine with a custom structure (bounded,
    instrumented, ...). Whatever the storage, set() must follow the
    resolution rules of MemoryCache: a value settling to None removes the
    key silently, any other value is broadcast to the key's subscribers.
    """

    def has(self, key: ResolvedKey) -> bool:
        """True if a value or a pending value is stored."""
        ...

    def get[D](self, key: ResolvedKey) -> CacheItem[D]:
        """Stored item. Check has() first."""
        ...

    def set[D](self, key: ResolvedKey, item: CacheItem[D]) -> None:
        """Store item, replacing any previous one, and schedule resolution."""
        ...

    def remove(self, key: ResolvedKey, options: ClearOptions | None = None) -> None:
        """Delete key, optionally broadcasting None first."""
        ...

    def clear(self, options: ClearOptions | None = None) -> None:
        """Delete every key, optionally broadcasting None for each first."""
        ...

    def keys(self) -> list[ResolvedKey]:
        """Snapshot of stored keys."""
        ...

    def subscribe[D](self, key: ResolvedKey, listener: Listener[D | None]) -> Unsubscribe:
        """Listen for value changes of key."""
        ...

    def unsubscribe[D](self, key: ResolvedKey, listener: Listener[D | None]) -> None:
        """Stop listening."""
        ...

    def broadcast[D](self, key: ResolvedKey, value: D | None) -> None:
        """Deliver value to the key's current subscribers."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Cache — Default
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryCache:
    """
    In-memory cache store.

    Resolution:
        set(pending item)  → on settle: None → remove key, else settle item + broadcast
        set(settled item)  → right away: None → remove key, else broadcast

    Note: Settlement is keyed by the key string, not by the item. A slow
    fetch that settles after a newer write still settles its own item and
    broadcasts its value to the key's subscribers.

    Example:
        cache = MemoryCache()
        cache.subscribe("/api/user", print)
        cache.set("/api/user", CacheItem({"name": "Alice"}))   # prints the dict
    """

    def __init__(self) -> None:
        self._elements: dict[ResolvedKey, CacheItem[Any]] = {}
        self._channel: Channel[Any] = Channel("cache")

    def has(self, key: ResolvedKey) -> bool:
        return key in self._elements

    def get[D](self, key: ResolvedKey) -> CacheItem[D]:
        try:
            return self._elements[key]
        except KeyError:
            raise MissingKeyError(key) from None

    def set[D](self, key: ResolvedKey, item: CacheItem[D]) -> None:
        self._elements[key] = item
        self._resolve(key, item)

    def remove(self, key: ResolvedKey, options: ClearOptions | None = None) -> None:
        broadcast = merge(DEFAULT_CLEAR_OPTIONS, options).broadcast
        if broadcast:
            self.broadcast(key, None)
        if self._elements.pop(key, None) is not None:
            logger.debug(f"Removed {key!r} (broadcast={broadcast})")

    def clear(self, options: ClearOptions | None = None) -> None:
        broadcast = merge(DEFAULT_CLEAR_OPTIONS, options).broadcast
        keys = self.keys()
        if broadcast:
            for key in keys:
                self.broadcast(key, None)
        self._elements.clear()
        logger.debug(f"Cleared {len(keys)} keys (broadcast={broadcast})")

    def keys(self) -> list[ResolvedKey]:
        return list(self._elements)

    def subscribe[D](self, key: ResolvedKey, listener: Listener[D | None]) -> Unsubscribe:
        return self._channel.subscribe(key, listener)

    def unsubscribe[D](self, key: ResolvedKey, listener: Listener[D | None]) -> None:
        self._channel.unsubscribe(key, listener)

    def broadcast[D](self, key: ResolvedKey, value: D | None) -> None:
        self._channel.publish(key, value)

    def __len__(self) -> int:
        return len(self._elements)

    # ─────────────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve[D](self, key: ResolvedKey, item: CacheItem[D]) -> None:
        match item.state:
            case Settled(value):
                self._settle(key, item, value)
            case Pending(future):
                future.add_done_callback(lambda f: self._on_done(key, item, f))

    def _on_done[D](
        self,
        key: ResolvedKey,
        item: CacheItem[D],
        future: asyncio.Future[D | None],
    ) -> None:
        if future.cancelled():
            logger.debug(f"Pending value for {key!r} was cancelled")
            self._settle(key, item, None)
            return
        exc = future.exception()
        if exc is not None:
            # Requestor never raises; only caller-supplied awaitables end up here.
            logger.warning(f"Pending value for {key!r} raised: {exc!r}")
            self._settle(key, item, None)
            return
        self._settle(key, item, future.result())

    def _settle[D](self, key: ResolvedKey, item: CacheItem[D], value: D | None) -> None:
        if value is None:
            logger.debug(f"{key!r} settled to nothing, removing")
            self.remove(key)
            return
        item.settle(value)
        logger.debug(f"{key!r} settled, broadcasting")
        self.broadcast(key, value)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Cache", "MemoryCache")
