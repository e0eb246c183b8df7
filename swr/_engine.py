"""
SWR engine — one cache, one error channel, and the controllers around them.

    engine = SWR(Options().with_fetcher(fetch_json))

    engine.subscribe("/api/user", on_data=render, on_error=show_banner)
    engine.mutate("/api/user", lambda user: {**user, "name": "Bob"})
    engine.revalidate("/api/user", RevalidateOptions().with_force())

Engines share nothing: two SWR instances never see each other's keys,
subscribers or errors.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from swr._cache import Cache, MemoryCache
from swr._channel import Channel
from swr._errors import SWRError
from swr._item import CacheItem
from swr._key import resolve_key
from swr._mutate import Mutator
from swr._options import (
    DEFAULT_OPTIONS,
    ClearOptions,
    MutateOptions,
    Options,
    RevalidateOptions,
    merge,
)
from swr._request import Requestor
from swr._revalidate import Revalidator
from swr._types import Fetcher, KeySpec, Listener, ResolvedKey, Unsubscribe

logger = logging.getLogger("swr.engine")


def _noop() -> None:
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Subscription — Handle Returned by SWR.subscribe()
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class Subscription:
    """
    Live subscription to one resolved key.

    Surface: active (False once unsubscribed, or when the key did not
    resolve), unsubscribe, mutate, revalidate, clear.

    Note: key is None when the key spec did not resolve; every method is
    then a no-op.
    """

    engine: SWR
    key: ResolvedKey | None
    options: Options
    _teardown: list[Unsubscribe] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return bool(self._teardown)

    def unsubscribe(self) -> None:
        """Stop data, error and trigger listeners. Safe to call twice."""
        teardown, self._teardown = self._teardown, []
        for off in teardown:
            off()

    def mutate(self, value: Any = None, options: MutateOptions | None = None) -> CacheItem[Any] | None:
        """Mutate this key; revalidates with the subscription's options by default."""
        opts = MutateOptions(revalidate_options=self.options.revalidate_options())
        return self.engine.mutate(self.key, value, merge(opts, options))

    def revalidate(self, options: RevalidateOptions | None = None) -> CacheItem[Any] | None:
        """Revalidate this key with the subscription's options under `options`."""
        return self.engine.revalidate(self.key, merge(self.options.revalidate_options(), options))

    def clear(self, options: ClearOptions | None = None) -> None:
        if self.key is not None:
            self.engine.clear(self.key, options)


# ═══════════════════════════════════════════════════════════════════════════════
# SWR Engine
# ═══════════════════════════════════════════════════════════════════════════════


class SWR:
    """
    Stale-while-revalidate engine.

    Public surface: resolve_key, cache, errors, request_data, revalidate,
    mutate, get, get_or_wait, subscribe_data, subscribe_errors, subscribe,
    clear.
    """

    def __init__(self, options: Options | None = None, cache: Cache | None = None) -> None:
        self._options = merge(DEFAULT_OPTIONS, options)
        self._cache: Cache = cache if cache is not None else MemoryCache()
        self._errors: Channel[BaseException] = Channel("errors")
        self._requestor = Requestor(self._errors)
        self._revalidator = Revalidator(
            self._cache,
            self._requestor,
            self._options.revalidate_options(),
        )
        self._mutator = Mutator(self._cache, self._revalidator)

    @property
    def options(self) -> Options:
        """Engine options, already merged over the built-in defaults."""
        return self._options

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def errors(self) -> Channel[BaseException]:
        return self._errors

    @staticmethod
    def resolve_key(key: KeySpec) -> ResolvedKey | None:
        return resolve_key(key)

    # ─────────────────────────────────────────────────────────────────────────
    # Fetching & Writing
    # ─────────────────────────────────────────────────────────────────────────

    async def request_data[D](self, key: KeySpec, fetcher: Fetcher[D] | None = None) -> D | None:
        """Run the fetcher once, outside the cache. Failures go to `errors`."""
        resolved = resolve_key(key)
        if resolved is None:
            return None
        return await self._requestor.request(resolved, fetcher or self._options.fetcher)

    def revalidate(
        self,
        key: KeySpec,
        options: RevalidateOptions | None = None,
    ) -> CacheItem[Any] | None:
        """
        Fetch key if forced, missing or expired. Returns the pending item if fetched.

        Note: Fetches need a running event loop. Called outside one this writes
        nothing, logs a warning and returns None.
        """
        return self._revalidator.revalidate(resolve_key(key), options)

    def mutate(
        self,
        key: KeySpec,
        value: Any = None,
        options: MutateOptions | None = None,
    ) -> CacheItem[Any] | None:
        """
        Write value (or fn(current)) for key, then revalidate unless disabled.

        Note: Outside a running event loop plain values are still written, but
        the revalidation is skipped and awaitable values are dropped.
        """
        return self._mutator.mutate(resolve_key(key), value, options)

    def clear(
        self,
        keys: KeySpec | Iterable[KeySpec] = None,
        options: ClearOptions | None = None,
    ) -> None:
        """
        Remove keys from the cache; no keys means everything.

        Example:
            engine.clear()                                       # whole cache
            engine.clear(["/api/user", "/api/todos"], ClearOptions(broadcast=True))
        """
        if keys is None:
            self._cache.clear(options)
            return
        specs: Iterable[KeySpec] = [keys] if isinstance(keys, str) or callable(keys) else keys
        for spec in specs:
            resolved = resolve_key(spec)
            if resolved is not None:
                self._cache.remove(resolved, options)

    # ─────────────────────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, key: KeySpec) -> Any:
        """Cached data for key; None if missing or still being fetched. Never fetches."""
        resolved = resolve_key(key)
        if resolved is None or not self._cache.has(resolved):
            return None
        item = self._cache.get(resolved)
        if item.is_resolving():
            return None
        return item.data

    async def get_or_wait(self, key: KeySpec) -> Any:
        """
        Cached data for key, or the next value broadcast for it.

        Raises:
            SWRError: key did not resolve
            Exception: whatever the next failed fetch for key raised
        """
        resolved = resolve_key(key)
        if resolved is None:
            raise SWRError("cannot wait on a key that does not resolve")

        cached = self.get(resolved)
        if cached is not None:
            return cached

        waiter: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        def on_data(value: Any) -> None:
            if value is not None and not waiter.done():
                waiter.set_result(value)

        def on_error(error: BaseException) -> None:
            if not waiter.done():
                waiter.set_exception(error)

        off_data = self._cache.subscribe(resolved, on_data)
        off_errors = self._errors.subscribe(resolved, on_error)
        try:
            return await waiter
        finally:
            off_data()
            off_errors()

    # ─────────────────────────────────────────────────────────────────────────
    # Subscribing
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe_data[D](self, key: KeySpec, on_data: Listener[D | None]) -> Unsubscribe:
        """Listen for value changes of key. None payload means the value was removed."""
        resolved = resolve_key(key)
        if resolved is None:
            return _noop
        return self._cache.subscribe(resolved, on_data)

    def subscribe_errors(self, key: KeySpec, on_error: Listener[BaseException]) -> Unsubscribe:
        """Listen for fetch failures of key."""
        resolved = resolve_key(key)
        if resolved is None:
            return _noop
        return self._errors.subscribe(resolved, on_error)

    def subscribe[D](
        self,
        key: KeySpec,
        on_data: Listener[D | None],
        on_error: Listener[BaseException] | None = None,
        options: Options | None = None,
    ) -> Subscription:
        """
        Subscribe to key and keep it fresh.

        Steps:
            1. listen for data (and errors)
            2. seed initial_data, or deliver the cached value
            3. revalidate on mount
            4. revalidate on focus (throttled) / reconnect triggers

        Example:
            sub = engine.subscribe("/api/user", on_data=render, on_error=log)
            ...
            sub.unsubscribe()
        """
        opts = merge(self._options, options)
        resolved = resolve_key(key)
        subscription = Subscription(engine=self, key=resolved, options=opts)
        if resolved is None:
            logger.debug("Subscription key did not resolve; nothing to do")
            return subscription

        teardown = subscription._teardown
        teardown.append(self._cache.subscribe(resolved, on_data))
        if on_error is not None:
            teardown.append(self._errors.subscribe(resolved, on_error))

        if opts.initial_data is not None:
            self._mutator.mutate(resolved, opts.initial_data, MutateOptions(revalidate=False))
        elif opts.load_initial_cache:
            cached = self.get(resolved)
            if cached is not None:
                on_data(cached)

        revalidate_options = opts.revalidate_options()

        def revalidate_now() -> None:
            self._revalidator.revalidate(resolved, revalidate_options)

        if opts.revalidate_on_mount:
            revalidate_now()

        if opts.revalidate_on_focus and opts.focus_when is not None:
            throttle = opts.focus_throttle_interval or 0
            last_focus: float | None = None

            def on_focus() -> None:
                nonlocal last_focus
                now = time.monotonic() * 1000
                if last_focus is None or now - last_focus > throttle:
                    last_focus = now
                    revalidate_now()
                else:
                    logger.debug(f"Focus revalidation of {resolved!r} throttled")

            teardown.append(opts.focus_when.listen(on_focus))

        if opts.revalidate_on_reconnect and opts.reconnect_when is not None:
            teardown.append(opts.reconnect_when.listen(revalidate_now))

        logger.debug(f"Subscribed to {resolved!r}")
        return subscription


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Subscription", "SWR")
