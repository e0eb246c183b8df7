"""
Mutation controller — writes a caller-supplied value through the cache.

    value is callable    → called with the current settled data (None if
                           absent or still pending); its result is stored
    value is CacheItem   → stored as-is (lets callers pick an expiration)
    anything else        → wrapped in a CacheItem without expiration, so the
                           next revalidation always refetches it

An awaitable value becomes a pending item and is broadcast once it settles;
anything else is broadcast immediately.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from swr._cache import Cache
from swr._item import CacheItem, has_running_loop
from swr._options import DEFAULT_MUTATE_OPTIONS, MutateOptions, merge
from swr._revalidate import Revalidator
from swr._types import ResolvedKey

logger = logging.getLogger("swr.mutate")


class Mutator:
    """
    Optimistic writes for one cache.

    Example:
        mutator.mutate("/api/todos", lambda todos: [*(todos or []), new_todo])
    """

    def __init__(self, cache: Cache, revalidator: Revalidator) -> None:
        self._cache = cache
        self._revalidator = revalidator

    def current(self, key: ResolvedKey) -> Any:
        """Settled data for key, or None when absent or pending."""
        if not self._cache.has(key):
            return None
        item = self._cache.get(key)
        if item.is_resolving():
            return None
        return item.data

    def mutate(
        self,
        key: ResolvedKey | None,
        value: Any = None,
        options: MutateOptions | None = None,
    ) -> CacheItem[Any] | None:
        """
        Write value for key, then revalidate unless told otherwise.

        Returns the stored item, or None when key is None. Outside a running
        event loop an awaitable value is dropped (None) and the follow-up
        revalidation is skipped; plain values are still written.
        """
        if not key:
            return None

        opts = merge(DEFAULT_MUTATE_OPTIONS, options)

        if callable(value):
            value = value(self.current(key))

        if inspect.isawaitable(value) and not has_running_loop():
            logger.warning(f"Not mutating {key!r}: awaitable value outside a running event loop")
            if inspect.iscoroutine(value):
                value.close()
            return None

        item: CacheItem[Any] = value if isinstance(value, CacheItem) else CacheItem(value)
        logger.debug(f"Mutating {key!r} (revalidate={opts.revalidate})")
        self._cache.set(key, item)

        if opts.revalidate:
            self._revalidator.revalidate(key, opts.revalidate_options)
        return item


__all__ = ("Mutator",)
