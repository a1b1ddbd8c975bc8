from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

SettledCallback = Callable[[str], Awaitable[Any] | None]
Sleeper = Callable[[float], Awaitable[Any]]


class SearchDebouncer:
    """Emits the last pushed search text once input has been quiet for ``wait_ms``."""

    def __init__(
        self,
        on_settled: SettledCallback,
        wait_ms: int = 300,
        sleeper: Sleeper | None = None,
        initial: str = "",
    ) -> None:
        self.wait_ms = wait_ms
        self._on_settled = on_settled
        self._sleep = sleeper or asyncio.sleep
        self._pending: asyncio.Task[None] | None = None
        self._emitting: set[asyncio.Task[None]] = set()
        self._latest = initial.strip()
        self._last_emitted = self._latest

    @property
    def latest(self) -> str:
        return self._latest

    @property
    def last_emitted(self) -> str:
        return self._last_emitted

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def push(self, text: str | None) -> None:
        self._latest = (text or "").strip()
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._settle(self._latest))
        self._pending = task
        self._emitting.add(task)
        task.add_done_callback(self._emitting.discard)

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def reset(self, value: str = "") -> None:
        self.cancel()
        self._latest = value.strip()
        self._last_emitted = self._latest

    async def wait_idle(self) -> None:
        while self._emitting:
            await asyncio.gather(*list(self._emitting), return_exceptions=True)

    async def _settle(self, value: str) -> None:
        await self._sleep(max(0, self.wait_ms) / 1000)
        if self._pending is asyncio.current_task():
            # past the quiet period the emission can no longer be superseded
            self._pending = None
        if value == self._last_emitted:
            return
        self._last_emitted = value
        result = self._on_settled(value)
        if inspect.isawaitable(result):
            await result
