"""
Revalidation controller — decides whether a key needs a fresh fetch.

Decision:
    force            → fetch
    key not cached   → fetch
    entry expired    → fetch
    otherwise        → nothing (cached value stays visible, no broadcast)

The fetched value is written straight into the cache as a pending item that
is fresh for `deduping_interval` ms. Because the pending entry is stored
before the fetch settles, a second revalidate() in that window finds a
fresh entry and is deduplicated.

Outside a running event loop nothing is fetched or written: revalidate()
logs a warning and returns None.

Note: This module never touches the mutation controller. The write below
is the only write revalidation performs, so mutate → revalidate can never
loop back into mutate.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from swr._cache import Cache
from swr._item import CacheItem, has_running_loop
from swr._options import DEFAULT_REVALIDATE_OPTIONS, RevalidateOptions, merge
from swr._request import Requestor
from swr._types import Fetcher, ResolvedKey

logger = logging.getLogger("swr.revalidate")


class Revalidator:
    """
    Issues fetches for stale or missing keys of one cache.

    `defaults` is the engine layer, merged between the built-in defaults and
    the per-call options.
    """

    def __init__(
        self,
        cache: Cache,
        requestor: Requestor,
        defaults: RevalidateOptions | None = None,
    ) -> None:
        self._cache = cache
        self._requestor = requestor
        self._defaults = defaults

    def should_fetch(self, key: ResolvedKey, force: bool = False) -> bool:
        """Apply the decision rule without side effects."""
        return force or not self._cache.has(key) or self._cache.get(key).has_expired()

    def revalidate(
        self,
        key: ResolvedKey | None,
        options: RevalidateOptions | None = None,
    ) -> CacheItem[Any] | None:
        """
        Revalidate key. Returns the pending item when a fetch was issued.

        Example:
            item = revalidator.revalidate("/api/user")
            if item is not None:
                user = await item.wait()
        """
        if not key:
            return None

        opts = merge(DEFAULT_REVALIDATE_OPTIONS, self._defaults, options)
        if not self.should_fetch(key, bool(opts.force)):
            logger.debug(f"Skipping fetch for {key!r}: cached entry still fresh")
            return None

        if not has_running_loop():
            logger.warning(f"Not fetching {key!r}: revalidate() called outside a running event loop")
            return None

        fetcher = cast(Fetcher[Any], opts.fetcher)
        interval = cast(float, opts.deduping_interval)
        logger.debug(f"Issuing fetch for {key!r} (force={opts.force}, dedupe={interval}ms)")
        item: CacheItem[Any] = CacheItem(self._requestor.request(key, fetcher)).expires_in(interval)
        self._cache.set(key, item)
        return item


__all__ = ("Revalidator",)
