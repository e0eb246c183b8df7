from __future__ import annotations

from collections.abc import Callable

import pytest

from swr import SWR, MemoryCache, Options

from tests.fakes import FakeFetcher, Recorder


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def make_engine(fetcher: FakeFetcher) -> Callable[..., SWR]:
    """Engine using the fake fetcher; mount revalidation off unless options say otherwise."""

    def build(options: Options | None = None) -> SWR:
        if options is None:
            options = Options(fetcher=fetcher).with_revalidate_on_mount(False)
        return SWR(options)

    return build


@pytest.fixture
def engine(make_engine: Callable[..., SWR]) -> SWR:
    return make_engine()
