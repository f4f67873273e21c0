"""Tests for the shared dataset cache."""

import asyncio

import pytest

from sitewind.cache import CacheState, DatasetCache, DatasetLoadError, get_dataset_cache
from sitewind.sources import file_loader


@pytest.fixture
def texts(altitude_text, wind_text):
    return altitude_text, wind_text


class CountingLoader:
    """Async loader that counts calls and can be told to fail or cancel."""

    def __init__(self, texts, fail_times=0, delay=0.01, cancel_times=0):
        self.texts = texts
        self.calls = 0
        self.fail_times = fail_times
        self.cancel_times = cancel_times
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.calls <= self.cancel_times:
            raise asyncio.CancelledError()
        if self.calls <= self.fail_times:
            raise OSError("dataset host unreachable")
        return self.texts


class TestDatasetCache:
    def test_starts_empty(self, texts):
        cache = DatasetCache(loader=CountingLoader(texts))
        assert cache.state == CacheState.EMPTY
        assert not cache.is_ready
        assert cache.get_sync() is None

    def test_ensure_builds_once(self, texts):
        loader = CountingLoader(texts)
        cache = DatasetCache(loader=loader)

        async def _test():
            first = await cache.ensure()
            second = await cache.ensure()
            return first, second

        first, second = asyncio.run(_test())
        assert first is second
        assert loader.calls == 1
        assert cache.state == CacheState.READY
        assert "SW1A1AA" in cache.get_sync().altitude_index

    def test_concurrent_callers_share_one_build(self, texts):
        loader = CountingLoader(texts, delay=0.05)
        cache = DatasetCache(loader=loader)

        async def _test():
            return await asyncio.gather(*(cache.ensure() for _ in range(5)))

        results = asyncio.run(_test())
        assert loader.calls == 1
        assert all(r is results[0] for r in results)

    def test_failure_reaches_every_waiter_then_retries(self, texts):
        loader = CountingLoader(texts, fail_times=1, delay=0.05)
        cache = DatasetCache(loader=loader)

        async def _test():
            return await asyncio.gather(cache.ensure(), cache.ensure(), return_exceptions=True)

        results = asyncio.run(_test())
        assert all(isinstance(r, DatasetLoadError) for r in results)
        assert loader.calls == 1
        assert cache.state == CacheState.FAILED
        assert isinstance(cache.last_error, OSError)

        data = asyncio.run(cache.ensure())
        assert loader.calls == 2
        assert cache.state == CacheState.READY
        assert cache.last_error is None
        assert "SW1A" in data.wind_index

    def test_reset(self, texts):
        loader = CountingLoader(texts)
        cache = DatasetCache(loader=loader)
        asyncio.run(cache.ensure())
        cache.reset()
        assert cache.state == CacheState.EMPTY
        asyncio.run(cache.ensure())
        assert loader.calls == 2

    def test_set_data(self, texts, datasets):
        cache = DatasetCache(loader=CountingLoader(texts))
        cache.set_data(datasets)
        assert cache.is_ready
        assert asyncio.run(cache.ensure()) is datasets

    def test_cancelled_build_is_retried(self, texts):
        loader = CountingLoader(texts, cancel_times=1)
        cache = DatasetCache(loader=loader)

        async def _test():
            with pytest.raises(asyncio.CancelledError):
                await cache.ensure()
            state = cache.state
            data = await cache.ensure()
            return state, data

        state, data = asyncio.run(_test())
        assert state == CacheState.EMPTY
        assert loader.calls == 2
        assert cache.state == CacheState.READY
        assert "EH1" in data.wind_index

    def test_oversized_wind_value_does_not_fail_build(self, altitude_text):
        wind = "Postcode,Speed\nSW1A,25\nEH1,1000000000000000\n"
        cache = DatasetCache(loader=CountingLoader((altitude_text, wind)))
        data = asyncio.run(cache.ensure())
        assert cache.state == CacheState.READY
        assert data.wind_index["SW1A"].speed_ms == 25.0


def test_file_loader(dataset_files):
    altitude_file, wind_file = dataset_files
    cache = DatasetCache(loader=file_loader(altitude_file, wind_file))
    data = asyncio.run(cache.ensure())
    assert data.altitude_index["DA119AU"].altitude == 35.5
    assert data.wind_index["DA11"].speed_ms == 21.5


def test_missing_file_is_load_error(tmp_path):
    cache = DatasetCache(loader=file_loader(tmp_path / "nope.csv", tmp_path / "nope2.csv"))
    with pytest.raises(DatasetLoadError):
        asyncio.run(cache.ensure())
    assert cache.state == CacheState.FAILED


def test_get_dataset_cache_is_singleton():
    assert get_dataset_cache() is get_dataset_cache()
