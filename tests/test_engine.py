import asyncio

import pytest

from swr import (
    SWR,
    CacheItem,
    ClearOptions,
    ManualTrigger,
    MutateOptions,
    Options,
    RevalidateOptions,
    SWRError,
)

from tests.fakes import FakeFetcher, Recorder


@pytest.mark.asyncio
async def test_revalidate_and_subscribe_scenario(engine, fetcher, recorder):
    engine.subscribe_data("k1", recorder)

    item = engine.revalidate("k1", RevalidateOptions(fetcher=FakeFetcher(value=42)))
    assert item is not None
    await item.wait()

    assert engine.get("k1") == 42
    assert recorder.events == [42]
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_error_keeps_previous_data_visible_to_subscriber(engine, fetcher):
    data, errors = Recorder(), Recorder()
    engine.subscribe("k", data, errors)
    engine.mutate("k", "good", MutateOptions(revalidate=False))
    fetcher.error = RuntimeError("boom")

    item = engine.revalidate("k")
    assert item is not None
    await item.wait()

    assert data.events == ["good"]
    assert [str(e) for e in errors.events] == ["boom"]
    assert not engine.cache.has("k")


def test_engines_do_not_share_state():
    first = SWR(Options(fetcher=FakeFetcher()))
    second = SWR(Options(fetcher=FakeFetcher()))
    seen = Recorder()
    second.subscribe_data("k", seen)

    first.mutate("k", 1, MutateOptions(revalidate=False))

    assert first.get("k") == 1
    assert second.get("k") is None
    assert not second.cache.has("k")
    assert seen.events == []


def test_engine_options_merge_over_defaults():
    engine = SWR(Options(deduping_interval=500))

    assert engine.options.deduping_interval == 500
    assert engine.options.focus_throttle_interval == 5000
    assert engine.options.revalidate_on_mount is True
    assert engine.options.fetcher is not None


@pytest.mark.asyncio
async def test_get_returns_none_while_pending(engine):
    item = engine.revalidate("k")

    assert engine.cache.has("k")
    assert engine.get("k") is None
    assert item is not None
    await item.wait()
    assert engine.get("k") == 42


@pytest.mark.asyncio
async def test_request_data_uses_engine_fetcher(engine, fetcher):
    assert await engine.request_data("k") == 42
    assert await engine.request_data("k", FakeFetcher(value="other")) == "other"
    assert await engine.request_data(None) is None
    assert fetcher.calls == ["k"]
    assert not engine.cache.has("k")


# ═══════════════════════════════════════════════════════════════════════════════
# get_or_wait
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_or_wait_returns_cached_value(engine):
    engine.mutate("k", "cached", MutateOptions(revalidate=False))
    assert await engine.get_or_wait("k") == "cached"


@pytest.mark.asyncio
async def test_get_or_wait_waits_for_fetch(engine):
    waiter = asyncio.ensure_future(engine.get_or_wait("k"))
    await asyncio.sleep(0)

    engine.revalidate("k")

    assert await asyncio.wait_for(waiter, timeout=1) == 42
    assert engine.errors.listener_count("k") == 0


@pytest.mark.asyncio
async def test_get_or_wait_raises_fetch_error(engine, fetcher):
    fetcher.error = LookupError("not found")
    waiter = asyncio.ensure_future(engine.get_or_wait("k"))
    await asyncio.sleep(0)

    engine.revalidate("k")

    with pytest.raises(LookupError):
        await asyncio.wait_for(waiter, timeout=1)


@pytest.mark.asyncio
async def test_get_or_wait_requires_a_key(engine):
    with pytest.raises(SWRError):
        await engine.get_or_wait(lambda: None)


# ═══════════════════════════════════════════════════════════════════════════════
# subscribe
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_subscribe_revalidates_on_mount(make_engine, fetcher, recorder):
    engine = make_engine(Options(fetcher=fetcher))

    sub = engine.subscribe("k", recorder)
    await engine.cache.get("k").wait()

    assert sub.active
    assert fetcher.calls == ["k"]
    assert recorder.events == [42]


def test_subscribe_delivers_cached_value(engine, recorder):
    engine.mutate("k", "cached", MutateOptions(revalidate=False))

    engine.subscribe("k", recorder)
    engine.subscribe("k", Recorder(), options=Options(load_initial_cache=False))

    assert recorder.events == ["cached"]


def test_subscribe_seeds_initial_data(engine, fetcher, recorder):
    engine.subscribe("k", recorder, options=Options(initial_data={"id": 0}))

    assert recorder.events == [{"id": 0}]
    assert engine.get("k") == {"id": 0}
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_subscription_options_override_engine(engine, recorder):
    local = FakeFetcher(value="local")

    sub = engine.subscribe("k", recorder, options=Options(fetcher=local, revalidate_on_mount=True))
    await engine.cache.get("k").wait()
    item = sub.revalidate(RevalidateOptions(force=True))
    assert item is not None
    await item.wait()

    assert local.calls == ["k", "k"]
    assert recorder.events == ["local", "local"]


@pytest.mark.asyncio
async def test_subscription_mutate_and_clear(engine, fetcher, recorder):
    sub = engine.subscribe("k", recorder)

    sub.mutate("optimistic", MutateOptions(revalidate=False))
    sub.clear(ClearOptions(broadcast=True))

    assert recorder.events == ["optimistic", None]
    assert not engine.cache.has("k")
    assert fetcher.calls == []


def test_unsubscribe_stops_everything(engine, fetcher, recorder):
    focus = ManualTrigger("focus")
    errors = Recorder()
    sub = engine.subscribe("k", recorder, errors, Options(focus_when=focus))
    assert sub.active

    sub.unsubscribe()
    sub.unsubscribe()
    engine.mutate("k", 1, MutateOptions(revalidate=False))
    engine.errors.publish("k", RuntimeError("late"))

    assert not sub.active
    assert focus.fire() == 0
    assert recorder.events == []
    assert errors.events == []


def test_unresolved_key_subscription_is_inert(engine, recorder):
    sub = engine.subscribe(lambda: None, recorder)

    assert sub.key is None
    assert not sub.active
    assert sub.mutate(1) is None
    assert sub.revalidate() is None
    sub.clear()
    sub.unsubscribe()
    assert engine.subscribe_data(None, recorder)() is None
    assert engine.subscribe_errors(None, recorder)() is None


@pytest.mark.asyncio
async def test_focus_revalidation_is_throttled(engine, fetcher):
    focus = ManualTrigger("focus")
    engine.subscribe("k", Recorder(), options=Options(focus_when=focus, focus_throttle_interval=60_000))

    focus.fire()
    await engine.cache.get("k").wait()
    engine.clear("k")
    focus.fire()

    assert fetcher.calls == ["k"]
    assert not engine.cache.has("k")


@pytest.mark.asyncio
async def test_focus_revalidation_after_throttle_window(engine, fetcher):
    focus = ManualTrigger("focus")
    engine.subscribe("k", Recorder(), options=Options(focus_when=focus, focus_throttle_interval=0))

    focus.fire()
    await engine.cache.get("k").wait()
    engine.clear("k")
    await asyncio.sleep(0.001)
    focus.fire()
    await engine.cache.get("k").wait()

    assert fetcher.calls == ["k", "k"]


def test_focus_disabled_ignores_trigger(engine, fetcher):
    focus = ManualTrigger("focus")
    engine.subscribe("k", Recorder(), options=Options(focus_when=focus, revalidate_on_focus=False))

    assert focus.fire() == 0
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_reconnect_trigger_revalidates(engine, fetcher):
    online = ManualTrigger("online")
    engine.subscribe("k", Recorder(), options=Options().with_revalidate_on_reconnect(when=online))

    assert online.fire() == 1
    await engine.cache.get("k").wait()

    assert fetcher.calls == ["k"]


# ═══════════════════════════════════════════════════════════════════════════════
# clear
# ═══════════════════════════════════════════════════════════════════════════════


def test_clear_selected_keys(engine):
    for key in ("a", "b", "c"):
        engine.mutate(key, key.upper(), MutateOptions(revalidate=False))
    seen = Recorder()
    engine.subscribe_data("a", seen)

    engine.clear(["a", lambda: "b", lambda: None], ClearOptions(broadcast=True))

    assert engine.cache.keys() == ["c"]
    assert seen.events == [None]


def test_clear_single_key_and_everything(engine):
    for key in ("a", "b", "c"):
        engine.mutate(key, CacheItem(key), MutateOptions(revalidate=False))

    engine.clear("a")
    assert sorted(engine.cache.keys()) == ["b", "c"]

    engine.clear()
    assert engine.cache.keys() == []


# ═══════════════════════════════════════════════════════════════════════════════
# outside a running event loop
# ═══════════════════════════════════════════════════════════════════════════════


def test_revalidate_without_loop_writes_nothing(engine, fetcher, caplog):
    with caplog.at_level("WARNING", logger="swr.revalidate"):
        assert engine.revalidate("k") is None
        assert engine.revalidate("k", RevalidateOptions(force=True)) is None

    assert not engine.cache.has("k")
    assert fetcher.calls == []
    assert "outside a running event loop" in caplog.text


def test_mutate_without_loop_keeps_value_and_skips_fetch(engine, fetcher, recorder):
    engine.subscribe_data("k", recorder)

    item = engine.mutate("k", 1)

    assert item is not None
    assert engine.cache.get("k") is item
    assert not item.is_resolving()
    assert engine.get("k") == 1
    assert recorder.events == [1]
    assert fetcher.calls == []


def test_mutate_without_loop_drops_awaitable_value(engine, fetcher):
    fetch = fetcher("k")

    assert engine.mutate("k", fetch) is None
    assert fetch.cr_frame is None
    assert not engine.cache.has("k")


def test_subscribe_without_loop_skips_mount_fetch(make_engine, fetcher, recorder):
    engine = make_engine(Options(fetcher=fetcher))

    sub = engine.subscribe("k", recorder)

    assert sub.active
    assert not engine.cache.has("k")
    assert fetcher.calls == []
