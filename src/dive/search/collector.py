"""Single consumer that drains match records to the output stream."""

from __future__ import annotations

import asyncio
from typing import TextIO

from dive.runtime_logging import RuntimeLogger


class ResultCollector:
    def __init__(
        self,
        results: asyncio.Queue[str],
        completed: asyncio.Event,
        out: TextIO,
        *,
        poll_interval: float,
        logger: RuntimeLogger,
    ) -> None:
        self._results = results
        self._completed = completed
        self._out = out
        self._poll_interval = poll_interval
        self._logger = logger

    async def drain(self) -> int:
        """Emit records until the latch has fired and the buffer is empty.

        Producers finish their last push before the latch can fire, so an
        empty buffer observed after the latch is final.
        """
        emitted = 0
        try:
            while True:
                if not self._results.empty():
                    self._write(self._results.get_nowait())
                    emitted += 1
                    continue
                if self._completed.is_set():
                    break
                record = await self._wait()
                if record is not None:
                    self._write(record)
                    emitted += 1
        finally:
            self._out.flush()
        return emitted

    def _write(self, record: str) -> None:
        self._logger.debug("collector.emit")
        self._out.write(record + "\n")
        self._out.flush()

    async def _wait(self) -> str | None:
        """Wait for the next record, the latch, or the idle delay."""
        getter = asyncio.create_task(self._results.get())
        latch = asyncio.create_task(self._completed.wait())
        timeout = self._poll_interval if self._poll_interval > 0 else None
        try:
            await asyncio.wait(
                {getter, latch},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            latch.cancel()
            getter.cancel()
            await asyncio.gather(getter, latch, return_exceptions=True)
        # A get that won the race against cancel() still holds its record.
        if getter.cancelled():
            return None
        return getter.result()
