"""Per-file content scanning under an admission token."""

from __future__ import annotations

import asyncio
import os
import stat
from pathlib import Path
from typing import BinaryIO

from dive.fs.records import RecordReader, decode_record
from dive.fs.sniff import SNIFF_LEN, detect_content_type, is_binary
from dive.search.context import SearchContext


def format_match(path: Path, line_no: int, text: str, *, no_prefix: bool) -> str:
    if no_prefix:
        return text
    return f"{path}:{line_no}: {text}"


async def scan_file(path: Path, ctx: SearchContext) -> None:
    """Scan one file and push every matching line, in line order.

    Failures only end this file's scan; they are logged and counted but
    never raised to the caller.
    """
    logger = ctx.logger
    async with ctx.gate.token():
        logger.debug("scan.start", path=str(path))
        try:
            mode = (await asyncio.to_thread(os.stat, path)).st_mode
            if not stat.S_ISREG(mode):
                logger.debug("scan.skip.irregular", path=str(path))
                ctx.summary.files_skipped += 1
                return
            handle = await asyncio.to_thread(open, path, "rb")
        except OSError as exc:
            logger.debug("scan.open.failed", path=str(path), error=str(exc))
            ctx.summary.errors += 1
            return

        try:
            await _scan_handle(path, handle, ctx)
        finally:
            await asyncio.to_thread(handle.close)


async def _scan_handle(path: Path, handle: BinaryIO, ctx: SearchContext) -> None:
    logger = ctx.logger
    settings = ctx.settings

    try:
        prefix = await asyncio.to_thread(handle.read, SNIFF_LEN)
    except OSError as exc:
        logger.debug("scan.prefix.failed", path=str(path), error=str(exc))
        ctx.summary.errors += 1
        return
    if not prefix:
        logger.debug("scan.prefix.failed", path=str(path), error="empty file")
        ctx.summary.files_skipped += 1
        return

    content_type = detect_content_type(prefix)
    if is_binary(content_type) and not settings.all_mimes:
        logger.debug("scan.skip.binary", path=str(path), content_type=content_type)
        ctx.summary.files_skipped += 1
        return

    ctx.summary.files_scanned += 1
    line_no = 0
    try:
        await asyncio.to_thread(handle.seek, 0)
        async for record in RecordReader(handle, settings.separator).records():
            line_no += 1
            text = decode_record(record)
            if not ctx.matcher.matches(text):
                continue
            text = text.removesuffix("\n")
            match = format_match(path, line_no, text, no_prefix=settings.no_prefix)
            logger.debug("scan.match", path=str(path), line=line_no)
            await ctx.emit(match)
    except OSError as exc:
        logger.debug("scan.read.failed", path=str(path), line=line_no + 1, error=str(exc))
        ctx.summary.errors += 1
