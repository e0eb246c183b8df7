"""
Options — behavior configuration.

Every option class is an immutable layer: fields left as None inherit from
the layer below. Layers merge as

    call-site options > engine options > built-in defaults

Example:
    engine = SWR(Options().with_fetcher(fetch_json).with_deduping_interval(500))
    engine.revalidate("/api/user", RevalidateOptions().with_force())
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, cast

from swr._request import http_fetcher
from swr._triggers import Trigger
from swr._types import Fetcher

# ═══════════════════════════════════════════════════════════════════════════════
# Layer Merging
# ═══════════════════════════════════════════════════════════════════════════════


def merge[O](base: O, *layers: O | None) -> O:
    """
    Merge option layers over a fully populated base.

    Later layers win; None fields never override.

    Example:
        merge(DEFAULT_CLEAR_OPTIONS, ClearOptions(broadcast=True)).broadcast  # True
    """
    changes: dict[str, Any] = {}
    for layer in layers:
        if layer is None:
            continue
        for f in fields(cast(Any, layer)):
            value = getattr(layer, f.name)
            if value is not None:
                changes[f.name] = value
    return replace(cast(Any, base), **changes)


# ═══════════════════════════════════════════════════════════════════════════════
# Revalidate Options
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RevalidateOptions:
    """
    How a single revalidation behaves.

    force: fetch even when the cached entry is still fresh.
    deduping_interval: milliseconds the fetched entry stays fresh.
    """

    fetcher: Fetcher[Any] | None = None
    deduping_interval: float | None = None
    force: bool | None = None

    def with_fetcher(self, fetcher: Fetcher[Any]) -> RevalidateOptions:
        return replace(self, fetcher=fetcher)

    def with_deduping_interval(self, milliseconds: float) -> RevalidateOptions:
        return replace(self, deduping_interval=milliseconds)

    def with_force(self, force: bool = True) -> RevalidateOptions:
        return replace(self, force=force)


# ═══════════════════════════════════════════════════════════════════════════════
# Mutate Options
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MutateOptions:
    """
    How a mutation behaves.

    revalidate: revalidate the key after writing (default True).
    revalidate_options: options for that revalidation.
    """

    revalidate: bool | None = None
    revalidate_options: RevalidateOptions | None = None

    def with_revalidate(self, revalidate: bool = True) -> MutateOptions:
        return replace(self, revalidate=revalidate)

    def with_revalidate_options(self, options: RevalidateOptions) -> MutateOptions:
        return replace(self, revalidate_options=options)


# ═══════════════════════════════════════════════════════════════════════════════
# Clear Options
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ClearOptions:
    """
    How removal behaves.

    broadcast: tell live subscribers the value is gone (they receive None).
    Without it, subscribers keep their last value until the next revalidation.
    """

    broadcast: bool | None = None

    def with_broadcast(self, broadcast: bool = True) -> ClearOptions:
        return replace(self, broadcast=broadcast)


# ═══════════════════════════════════════════════════════════════════════════════
# Options — Engine / Subscription Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Options:
    """
    Full engine configuration; also accepted per subscription.

    Note: Intervals are milliseconds.
    focus_when / reconnect_when: signal sources for focus and reconnect
    revalidation. Without them the corresponding flag has no effect.
    """

    fetcher: Fetcher[Any] | None = None
    initial_data: Any = None
    revalidate_on_mount: bool | None = None
    deduping_interval: float | None = None
    revalidate_on_focus: bool | None = None
    focus_throttle_interval: float | None = None
    revalidate_on_reconnect: bool | None = None
    focus_when: Trigger | None = None
    reconnect_when: Trigger | None = None
    load_initial_cache: bool | None = None

    def with_fetcher(self, fetcher: Fetcher[Any]) -> Options:
        return replace(self, fetcher=fetcher)

    def with_initial_data(self, data: Any) -> Options:
        return replace(self, initial_data=data)

    def with_revalidate_on_mount(self, enabled: bool = True) -> Options:
        return replace(self, revalidate_on_mount=enabled)

    def with_deduping_interval(self, milliseconds: float) -> Options:
        return replace(self, deduping_interval=milliseconds)

    def with_revalidate_on_focus(
        self,
        enabled: bool = True,
        *,
        throttle: float | None = None,
        when: Trigger | None = None,
    ) -> Options:
        """
        Revalidate when `when` fires, at most once per `throttle` ms.

        Example:
            .with_revalidate_on_focus(throttle=10_000, when=focus_trigger)
        """
        return replace(
            self,
            revalidate_on_focus=enabled,
            focus_throttle_interval=throttle if throttle is not None else self.focus_throttle_interval,
            focus_when=when if when is not None else self.focus_when,
        )

    def with_revalidate_on_reconnect(
        self,
        enabled: bool = True,
        *,
        when: Trigger | None = None,
    ) -> Options:
        return replace(
            self,
            revalidate_on_reconnect=enabled,
            reconnect_when=when if when is not None else self.reconnect_when,
        )

    def with_load_initial_cache(self, enabled: bool = True) -> Options:
        return replace(self, load_initial_cache=enabled)

    def revalidate_options(self) -> RevalidateOptions:
        """The revalidation-relevant slice of these options."""
        return RevalidateOptions(
            fetcher=self.fetcher,
            deduping_interval=self.deduping_interval,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Built-in Defaults
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_OPTIONS = Options(
    fetcher=http_fetcher,
    initial_data=None,
    revalidate_on_mount=True,
    deduping_interval=2000,
    revalidate_on_focus=True,
    focus_throttle_interval=5000,
    revalidate_on_reconnect=True,
    focus_when=None,
    reconnect_when=None,
    load_initial_cache=True,
)

DEFAULT_REVALIDATE_OPTIONS = RevalidateOptions(
    fetcher=http_fetcher,
    deduping_interval=2000,
    force=False,
)

DEFAULT_MUTATE_OPTIONS = MutateOptions(
    revalidate=True,
    revalidate_options=RevalidateOptions(),
)

DEFAULT_CLEAR_OPTIONS = ClearOptions(broadcast=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "merge",
    "RevalidateOptions",
    "MutateOptions",
    "ClearOptions",
    "Options",
    "DEFAULT_OPTIONS",
    "DEFAULT_REVALIDATE_OPTIONS",
    "DEFAULT_MUTATE_OPTIONS",
    "DEFAULT_CLEAR_OPTIONS",
)
