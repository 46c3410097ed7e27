from collections.abc import Iterator
from typing import Any

import pytest

from fakes import T0, CacheFactory, FakeDocumentSource
from src.adapters.clock import FixedClock
from src.components.redirects import RedirectCache, RedirectConfig


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def source() -> FakeDocumentSource:
    return FakeDocumentSource()


@pytest.fixture
def make_cache(clock: FixedClock) -> Iterator[CacheFactory]:
    """Factory for caches that are shut down after the test."""
    created: list[RedirectCache] = []

    def _make(src: Any, config: RedirectConfig | None = None) -> RedirectCache:
        cache = RedirectCache(source=src, config=config, time=clock)
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        cache.shutdown(wait=False)


@pytest.fixture
def cache(make_cache: CacheFactory, source: FakeDocumentSource) -> RedirectCache:
    return make_cache(source)
