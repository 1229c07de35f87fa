"""Separator-delimited record streaming over a binary file handle."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, BinaryIO

CHUNK_SIZE = 64 * 1024


class RecordReader:
    """Yield records terminated by ``separator``, separator included.

    Reads happen off the event loop in fixed-size chunks; a trailing
    record without a separator is yielded as-is at end of file.
    """

    def __init__(self, handle: BinaryIO, separator: bytes, *, chunk_size: int = CHUNK_SIZE) -> None:
        if len(separator) != 1:
            raise ValueError("separator must be a single byte")
        self._handle = handle
        self._separator = separator
        self._chunk_size = chunk_size

    async def records(self) -> AsyncIterator[bytes]:
        pending = bytearray()
        while True:
            chunk = await asyncio.to_thread(self._handle.read, self._chunk_size)
            if not chunk:
                break
            pending += chunk
            start = 0
            while True:
                end = pending.find(self._separator, start)
                if end < 0:
                    break
                yield bytes(pending[start : end + 1])
                start = end + 1
            del pending[:start]

        if pending:
            yield bytes(pending)


def decode_record(record: bytes) -> str:
    return record.decode("utf-8", errors="replace")
