"""
Per-key broadcast channel.

Used twice per engine: the cache publishes data on one, the requestor
publishes fetch failures on another.
"""

from __future__ import annotations

import logging

from swr._types import Listener, ResolvedKey, Unsubscribe

logger = logging.getLogger("swr.channel")


class Channel[T]:
    """
    Typed publish/subscribe keyed by resolved key.

    Delivery is synchronous: publish() returns after every listener
    subscribed at publish time has been called. A listener that raises is
    logged and the remaining listeners still run.

    Example:
        errors = Channel[BaseException]()
        off = errors.subscribe("/api/user", lambda e: print("failed:", e))
        errors.publish("/api/user", RuntimeError("boom"))
        off()
    """

    def __init__(self, name: str = "channel") -> None:
        self._name = name
        self._listeners: dict[ResolvedKey, list[Listener[T]]] = {}

    @property
    def name(self) -> str:
        return self._name

    def subscribe(self, key: ResolvedKey, listener: Listener[T]) -> Unsubscribe:
        """Register listener for key. Returns a handle that removes it."""
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(key, listener)

        return unsubscribe

    def unsubscribe(self, key: ResolvedKey, listener: Listener[T]) -> None:
        """Remove one registration of listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(key)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            del self._listeners[key]

    def publish(self, key: ResolvedKey, payload: T) -> int:
        """Deliver payload to the current listeners of key. Returns how many."""
        # Snapshot: listeners may unsubscribe themselves while being called.
        listeners = tuple(self._listeners.get(key, ()))
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception(f"[{self._name}] listener for {key!r} raised")
        return len(listeners)

    def listener_count(self, key: ResolvedKey) -> int:
        return len(self._listeners.get(key, ()))

    def clear(self) -> None:
        """Drop every listener of every key."""
        self._listeners.clear()


__all__ = ("Channel",)
