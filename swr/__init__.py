"""
swr — stale-while-revalidate data cache for asyncio.

    import swr

    engine = swr.SWR(swr.Options().with_fetcher(fetch_json))
    engine.subscribe("/api/user", on_data=render, on_error=show_error)
    engine.mutate("/api/user", lambda user: {**user, "name": "Bob"})

Or through the process-wide default engine (fetches need a running loop):

    swr.create_default(swr.Options().with_deduping_interval(500))

    async def load_user():
        swr.revalidate("/api/user")
        return await swr.get_or_wait("/api/user")
"""

from swr._types import (
    ResolvedKey,
    KeySpec,
    InfiniteKeySpec,
    Fetcher,
    Listener,
    Unsubscribe,
    StateFn,
)
from swr._errors import SWRError, MissingKeyError
from swr._key import resolve_key, resolve_infinite_key
from swr._item import CacheItem, Pending, Settled, ItemState
from swr._channel import Channel
from swr._triggers import Trigger, ManualTrigger
from swr._request import Requestor, http_fetcher
from swr._options import (
    Options,
    RevalidateOptions,
    MutateOptions,
    ClearOptions,
    merge,
    DEFAULT_OPTIONS,
    DEFAULT_REVALIDATE_OPTIONS,
    DEFAULT_MUTATE_OPTIONS,
    DEFAULT_CLEAR_OPTIONS,
)
from swr._cache import Cache, MemoryCache
from swr._revalidate import Revalidator
from swr._mutate import Mutator
from swr._engine import SWR, Subscription
from swr._default import (
    default,
    create_default,
    request_data,
    revalidate,
    mutate,
    clear,
    get,
    get_or_wait,
    subscribe_data,
    subscribe_errors,
    subscribe,
)

__version__ = "0.1.0"

__all__ = (
    # Types
    "ResolvedKey",
    "KeySpec",
    "InfiniteKeySpec",
    "Fetcher",
    "Listener",
    "Unsubscribe",
    "StateFn",
    # Errors
    "SWRError",
    "MissingKeyError",
    # Keys
    "resolve_key",
    "resolve_infinite_key",
    # Items
    "CacheItem",
    "Pending",
    "Settled",
    "ItemState",
    # Channels & triggers
    "Channel",
    "Trigger",
    "ManualTrigger",
    # Fetching
    "Requestor",
    "http_fetcher",
    # Options
    "Options",
    "RevalidateOptions",
    "MutateOptions",
    "ClearOptions",
    "merge",
    "DEFAULT_OPTIONS",
    "DEFAULT_REVALIDATE_OPTIONS",
    "DEFAULT_MUTATE_OPTIONS",
    "DEFAULT_CLEAR_OPTIONS",
    # Cache & controllers
    "Cache",
    "MemoryCache",
    "Revalidator",
    "Mutator",
    # Engine
    "SWR",
    "Subscription",
    # Default engine
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
