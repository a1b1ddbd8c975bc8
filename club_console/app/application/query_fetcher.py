from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from club_console.app.listing_cache import ListingCache

T = TypeVar("T")


class QueryFetcher:
    """Reads through the listing cache and shares one in-flight request per key.

    A result that lands after an invalidation of a matching prefix is returned to
    its caller but not written to the cache, and later callers start a new request
    instead of joining it.
    """

    def __init__(self, cache: ListingCache) -> None:
        self.cache = cache
        self._inflight: dict[str, tuple[asyncio.Task[Any], int]] = {}

    def cached(self, key: str) -> Any | None:
        return self.cache.get(key)

    def is_inflight(self, key: str) -> bool:
        return self._shareable(key) is not None

    async def fetch(self, key: str, loader: Callable[[], Awaitable[T]], *, force: bool = False) -> T:
        if not force:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
            inflight = self._shareable(key)
            if inflight is not None:
                return await asyncio.shield(inflight)

        version = self.cache.begin_read()
        task = asyncio.get_running_loop().create_task(self._load(key, loader, version))
        self._inflight[key] = (task, version)
        task.add_done_callback(_retrieve_exception)
        task.add_done_callback(lambda _: self.cache.end_read(version))
        return await asyncio.shield(task)

    def _shareable(self, key: str) -> asyncio.Task[Any] | None:
        entry = self._inflight.get(key)
        if entry is None:
            return None
        task, started_at = entry
        if self.cache.invalidated_since(key, started_at):
            return None
        return task

    async def _load(self, key: str, loader: Callable[[], Awaitable[T]], observed_version: int) -> T:
        try:
            value = await loader()
            self.cache.set(key, value, observed_version=observed_version)
            return value
        finally:
            entry = self._inflight.get(key)
            if entry is not None and entry[0] is asyncio.current_task():
                del self._inflight[key]


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    if not task.cancelled():
        task.exception()
