from __future__ import annotations

import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

InvalidationListener = Callable[[str], None]


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class ListingCache:
    """In-memory TTL cache for read-only listing payloads, shared between list views.

    ``invalidate_prefix`` is broadcast synchronously to every subscriber so that
    views showing a matching key can revalidate.

    Readers that want to write back a value they loaded register the version they
    observed with ``begin_read`` and release it with ``end_read``. The ledger of
    invalidated prefixes only keeps entries newer than the oldest open read.
    """

    def __init__(self, ttl_seconds: float = 30.0, now: Callable[[], float] | None = None) -> None:
        self.ttl_seconds = max(1.0, ttl_seconds)
        self._now = now or time.monotonic
        self._entries: dict[str, CacheEntry] = {}
        self._listeners: list[InvalidationListener] = []
        self._version = 0
        self._invalidated_at: dict[str, int] = {}
        self._open_reads: Counter[int] = Counter()

    @property
    def version(self) -> int:
        return self._version

    @property
    def tracked_invalidations(self) -> int:
        return len(self._invalidated_at)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if not entry:
            return None
        if entry.expires_at <= self._now():
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, observed_version: int | None = None) -> bool:
        if observed_version is not None and self.invalidated_since(key, observed_version):
            return False
        self._entries[key] = CacheEntry(value=value, expires_at=self._now() + self.ttl_seconds)
        return True

    def begin_read(self) -> int:
        self._open_reads[self._version] += 1
        return self._version

    def end_read(self, observed_version: int) -> None:
        self._open_reads[observed_version] -= 1
        if self._open_reads[observed_version] <= 0:
            del self._open_reads[observed_version]
        self._prune()

    def invalidate_prefix(self, prefix: str) -> None:
        self._version += 1
        self._invalidated_at[prefix] = self._version
        self._prune()
        stale_keys = [key for key in self._entries if key.startswith(prefix)]
        for key in stale_keys:
            self._entries.pop(key, None)
        for listener in list(self._listeners):
            listener(prefix)

    def subscribe(self, listener: InvalidationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear(self) -> None:
        self._entries.clear()

    def invalidated_since(self, key: str, observed_version: int) -> bool:
        return any(
            key.startswith(prefix) and version > observed_version for prefix, version in self._invalidated_at.items()
        )

    def _prune(self) -> None:
        # nothing at or below the oldest open read can be observed again
        floor = min(self._open_reads, default=self._version)
        if any(version <= floor for version in self._invalidated_at.values()):
            self._invalidated_at = {
                prefix: version for prefix, version in self._invalidated_at.items() if version > floor
            }
