"""Outstanding-job counter with a one-shot completion latch."""

from __future__ import annotations

import asyncio


class TaskCounter:
    def __init__(self) -> None:
        self._pending = 0
        self._latch = asyncio.Event()

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def completed(self) -> asyncio.Event:
        return self._latch

    def add(self, count: int = 1) -> None:
        if self._latch.is_set():
            raise RuntimeError("cannot register work after the counter reached zero")
        self._pending += count

    def done(self) -> None:
        if self._pending <= 0:
            raise RuntimeError("done() called more often than add()")
        self._pending -= 1
        if self._pending == 0:
            self._latch.set()

    async def wait(self) -> None:
        await self._latch.wait()
