"""Process-wide cache of the built dataset indices.

The datasets are loaded and indexed once per process. Concurrent
callers of :meth:`DatasetCache.ensure` share a single in-flight build;
nobody triggers a second read or parse while one is running. A failed
build is discarded so the next call starts again from scratch. Once
built, the indices are never mutated and can be read from anywhere
without locking.

States
------
- ``empty``:    nothing loaded yet (or after :meth:`DatasetCache.reset`)
- ``building``: one shared build in flight
- ``ready``:    indices available through :meth:`DatasetCache.get_sync`
- ``failed``:   last build raised; the next ``ensure()`` retries
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from functools import lru_cache
from typing import Awaitable, Callable, Optional

from sitewind.datasets import DatasetPair, build_dataset_cache
from sitewind.sources import load_dataset_texts

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[tuple[str, str]]]


class DatasetLoadError(RuntimeError):
    """Raised to every waiter when fetching or building the datasets fails."""


class CacheState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


class DatasetCache:
    """Memoised holder of the altitude and wind indices."""

    def __init__(self, loader: Optional[Loader] = None) -> None:
        self._loader: Loader = loader or load_dataset_texts
        self._data: Optional[DatasetPair] = None
        self._inflight: Optional[asyncio.Future[DatasetPair]] = None
        self._last_error: Optional[BaseException] = None
        self._generation = 0

    @property
    def state(self) -> CacheState:
        if self._data is not None:
            return CacheState.READY
        if self._inflight is not None:
            return CacheState.BUILDING
        if self._last_error is not None:
            return CacheState.FAILED
        return CacheState.EMPTY

    @property
    def is_ready(self) -> bool:
        return self._data is not None

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    def get_sync(self) -> Optional[DatasetPair]:
        """Return the built indices, or ``None`` if not built yet."""
        return self._data

    async def ensure(self) -> DatasetPair:
        """Return the indices, building them on first use.

        Raises
        ------
        DatasetLoadError
            If the shared build fails. Every concurrent waiter receives
            the same error.
        """
        if self._data is not None:
            return self._data
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._build(self._generation))
        # Shielded so a cancelled caller does not cancel the shared build
        return await asyncio.shield(self._inflight)

    async def _build(self, generation: int) -> DatasetPair:
        logger.info("Building dataset cache")
        try:
            altitude_text, wind_text = await self._loader()
            data = await asyncio.to_thread(build_dataset_cache, altitude_text, wind_text)
        except Exception as exc:
            if generation == self._generation:
                self._last_error = exc
            logger.warning("Dataset cache build failed: %s", exc)
            raise DatasetLoadError(f"Failed to load datasets: {exc}") from exc
        finally:
            # Cancellation included; a later ensure() must start a new build
            if generation == self._generation:
                self._inflight = None

        if generation == self._generation:
            self._data = data
            self._last_error = None
        logger.info(
            "Dataset cache ready: %d altitude keys, %d wind sectors",
            len(data.altitude_index),
            len(data.wind_index),
        )
        return data

    def set_data(self, data: DatasetPair) -> None:
        """Install already-built indices (used by the CLI and tests)."""
        self._generation += 1
        self._data = data
        self._inflight = None
        self._last_error = None

    def reset(self) -> None:
        """Forget everything; an in-flight build finishes but is discarded."""
        self._generation += 1
        self._data = None
        self._inflight = None
        self._last_error = None


@lru_cache
def get_dataset_cache() -> DatasetCache:
    """Return the process-wide dataset cache (singleton)."""
    return DatasetCache()


__all__ = [
    "CacheState",
    "DatasetCache",
    "DatasetLoadError",
    "Loader",
    "get_dataset_cache",
]
