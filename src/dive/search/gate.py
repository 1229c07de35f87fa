"""Fixed-size token pool bounding how many files are open at once."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class AdmissionGate:
    """Pre-loaded pool of ``capacity`` tokens.

    ``acquire`` waits for a free token, ``release`` hands one back without
    waiting. Prefer ``async with gate.token():`` so the release happens on
    every exit path.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._tokens: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity)
        for _ in range(capacity):
            self._tokens.put_nowait(object())
        self.in_use = 0
        self.peak = 0

    async def acquire(self) -> None:
        await self._tokens.get()
        self.in_use += 1
        self.peak = max(self.peak, self.in_use)

    def release(self) -> None:
        if self.in_use <= 0:
            raise RuntimeError("release() without a matching acquire()")
        self.in_use -= 1
        self._tokens.put_nowait(object())

    @asynccontextmanager
    async def token(self) -> AsyncIterator[None]:
        await self.acquire()
        try:
            yield
        finally:
            self.release()

    @property
    def available(self) -> int:
        return self._tokens.qsize()
