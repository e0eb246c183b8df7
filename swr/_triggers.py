"""
Triggers — pluggable signal sources for focus / reconnect revalidation.

The engine does not know what "focus" or "back online" means for a given
host. A trigger is anything that can call a callback when it happens.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from swr._types import Unsubscribe

logger = logging.getLogger("swr.triggers")


class Trigger(Protocol):
    """
    Signal source protocol.

    Implement this to connect a host event (UI focus, network monitor,
    SIGHUP, a message queue ...).

    Example:
        class NetworkTrigger:
            def __init__(self, monitor: NetworkMonitor) -> None:
                self.monitor = monitor

            def listen(self, callback: Callable[[], None]) -> Unsubscribe:
                handle = self.monitor.on_online(callback)
                return handle.cancel
    """

    def listen(self, callback: Callable[[], None]) -> Unsubscribe:
        """Call `callback` every time the signal fires, until unsubscribed."""
        ...


class ManualTrigger:
    """
    In-process trigger fired explicitly.

    Example:
        focus = ManualTrigger("focus")
        engine = SWR(Options().with_revalidate_on_focus(when=focus))
        ...
        focus.fire()   # every live subscription revalidates (throttled)
    """

    def __init__(self, name: str = "manual") -> None:
        self._name = name
        self._callbacks: list[Callable[[], None]] = []

    @property
    def name(self) -> str:
        return self._name

    def listen(self, callback: Callable[[], None]) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def fire(self) -> int:
        """Notify every listener. Returns how many were notified."""
        callbacks = tuple(self._callbacks)
        logger.debug(f"Trigger {self._name!r} fired ({len(callbacks)} listeners)")
        for callback in callbacks:
            callback()
        return len(callbacks)


__all__ = ("Trigger", "ManualTrigger")
