"""
Cache item — a value (or a value still being fetched) plus its expiration.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Self

# ═══════════════════════════════════════════════════════════════════════════════
# Item State — Pending | Settled
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Pending[D]:
    """A fetch is in flight; the future settles to the value (or None)."""

    future: asyncio.Future[D | None]


@dataclass(frozen=True, slots=True)
class Settled[D]:
    """The value is known."""

    value: D | None


type ItemState[D] = Pending[D] | Settled[D]


def has_running_loop() -> bool:
    """True when called from inside a running event loop; pending items need one."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Item
# ═══════════════════════════════════════════════════════════════════════════════


class CacheItem[D]:
    """
    Stored cache entry.

    Lifecycle:
        Pending → Settled (in place, same object)
                → removed from the cache (settled to None)

    Note: Identity matters. The cache settles the item object it was given,
    so a caller holding a reference sees the value once it arrives.

    Example:
        CacheItem({"id": 1})                                  # settled, always stale
        CacheItem(fetch_user(1)).expires_in(2000)             # pending, fresh for 2s
        CacheItem(user, expires_at=datetime.now() + delta)    # settled, explicit expiry
    """

    __slots__ = ("state", "expires_at")

    def __init__(self, data: Any = None, expires_at: datetime | None = None) -> None:
        self.state: ItemState[D]
        if inspect.isawaitable(data):
            self.state = Pending(asyncio.ensure_future(data))
        else:
            self.state = Settled(data)
        self.expires_at = expires_at

    @property
    def data(self) -> D | None:
        """Settled value, or None while pending."""
        match self.state:
            case Settled(value):
                return value
            case Pending():
                return None

    def is_resolving(self) -> bool:
        """True while the value is still being fetched."""
        return isinstance(self.state, Pending)

    def has_expired(self) -> bool:
        """True when there is no expiration or it lies in the past."""
        return self.expires_at is None or self.expires_at < datetime.now()

    def expires_in(self, milliseconds: float) -> Self:
        """Expire `milliseconds` from now."""
        self.expires_at = datetime.now() + timedelta(milliseconds=milliseconds)
        return self

    def settle(self, value: D | None) -> None:
        """Replace the payload in place."""
        self.state = Settled(value)

    async def wait(self) -> D | None:
        """Wait for the in-flight value; returns immediately when settled."""
        match self.state:
            case Settled(value):
                return value
            case Pending(future):
                return await asyncio.shield(future)

    def __repr__(self) -> str:
        match self.state:
            case Settled(value):
                return f"CacheItem(data={value!r}, expires_at={self.expires_at!r})"
            case Pending():
                return f"CacheItem(<pending>, expires_at={self.expires_at!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Pending", "Settled", "ItemState", "CacheItem", "has_running_loop")
