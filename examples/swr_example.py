"""
SWR — stale data now, fresh data when it arrives.

Key concepts:
- Subscribe = listen for a key's value (and its fetch errors)
- Revalidate = refetch only if forced, missing or expired (deduplicated)
- Mutate = optimistic write, then revalidate to confirm with the origin
"""

from swr import SWR, ManualTrigger, MutateOptions, Options, RevalidateOptions
from examples._infra import banner, run, FakeApi


api = FakeApi()
focus = ManualTrigger("focus")

engine = SWR(
    Options()
    .with_fetcher(api.fetch)
    .with_deduping_interval(2000)
    .with_revalidate_on_focus(throttle=5000, when=focus)
)


def show(label: str):
    return lambda value: print(f"   [{label}] data → {value}")


def show_error(error: BaseException) -> None:
    print(f"   [error] {error}")


async def main() -> None:
    banner("SWR: Stale-While-Revalidate")

    print("\n1. Subscribe (revalidates on mount):")
    sub = engine.subscribe("/users/1", show("alice"), show_error)
    print(f"   get() while fetching → {engine.get('/users/1')}")
    await engine.get_or_wait("/users/1")

    print("\n2. Revalidate twice inside the dedup window (no round trip):")
    engine.revalidate("/users/1")
    engine.revalidate("/users/1")
    print(f"   origin requests so far: {api.requests}")

    print("\n3. Optimistic rename, then confirm with origin:")
    sub.mutate(lambda user: {**user, "name": "Alice (editing)"})
    await engine.get_or_wait("/users/1")

    print("\n4. Forced revalidation ignores freshness:")
    item = engine.revalidate("/users/1", RevalidateOptions(force=True))
    if item is not None:
        await item.wait()

    print("\n5. Failed fetch → error event, stale data kept by the subscriber:")
    engine.subscribe("/users/404", show("missing"), show_error)
    await engine.request_data("/users/404")

    print("\n6. Focus trigger (throttled):")
    focus.fire()
    focus.fire()
    print(f"   origin requests so far: {api.requests}")

    print("\n7. Local-only write, no revalidation:")
    engine.mutate("/users/1", {"id": 1, "name": "Offline Alice"}, MutateOptions(revalidate=False))

    sub.unsubscribe()
    print("\nDone!")


if __name__ == "__main__":
    run(main)
