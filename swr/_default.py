"""
Process-wide default engine.

Convenience for applications that only need one cache. The default engine is
created lazily; create_default() replaces it (existing subscriptions stay
attached to the old engine).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from swr._cache import Cache
from swr._engine import SWR, Subscription
from swr._item import CacheItem
from swr._options import ClearOptions, MutateOptions, Options, RevalidateOptions
from swr._types import Fetcher, KeySpec, Listener, Unsubscribe

_default: SWR | None = None


def default() -> SWR:
    """Get or create the default engine."""
    global _default
    if _default is None:
        _default = SWR()
    return _default


def create_default(options: Options | None = None, cache: Cache | None = None) -> SWR:
    """Replace the default engine with a new one built from options."""
    global _default
    _default = SWR(options, cache)
    return _default


# ═══════════════════════════════════════════════════════════════════════════════
# Shortcuts — Delegate to the Default Engine
# ═══════════════════════════════════════════════════════════════════════════════


async def request_data[D](key: KeySpec, fetcher: Fetcher[D] | None = None) -> D | None:
    return await default().request_data(key, fetcher)


def revalidate(key: KeySpec, options: RevalidateOptions | None = None) -> CacheItem[Any] | None:
    """Fetches only inside a running event loop; elsewhere logs a warning and returns None."""
    return default().revalidate(key, options)


def mutate(key: KeySpec, value: Any = None, options: MutateOptions | None = None) -> CacheItem[Any] | None:
    """Plain values are written anywhere; fetching needs a running event loop."""
    return default().mutate(key, value, options)


def clear(keys: KeySpec | Iterable[KeySpec] = None, options: ClearOptions | None = None) -> None:
    default().clear(keys, options)


def get(key: KeySpec) -> Any:
    return default().get(key)


async def get_or_wait(key: KeySpec) -> Any:
    return await default().get_or_wait(key)


def subscribe_data[D](key: KeySpec, on_data: Listener[D | None]) -> Unsubscribe:
    return default().subscribe_data(key, on_data)


def subscribe_errors(key: KeySpec, on_error: Listener[BaseException]) -> Unsubscribe:
    return default().subscribe_errors(key, on_error)


def subscribe[D](
    key: KeySpec,
    on_data: Listener[D | None],
    on_error: Listener[BaseException] | None = None,
    options: Options | None = None,
) -> Subscription:
    return default().subscribe(key, on_data, on_error, options)


__all__ = (
    "default",
    "create_default",
    "request_data",
    "revalidate",
    "mutate",
    "clear",
    "get",
    "get_or_wait",
    "subscribe_data",
    "subscribe_errors",
    "subscribe",
)
