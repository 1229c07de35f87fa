"""Tree traversal over a bounded pool of worker tasks."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

from dive.search.context import SearchContext
from dive.search.scanner import scan_file

JobKind = Literal["dispatch", "scan"]


@dataclass(frozen=True, slots=True)
class Job:
    kind: JobKind
    path: Path

    @classmethod
    def dispatch(cls, path: Path) -> "Job":
        return cls(kind="dispatch", path=path)

    @classmethod
    def scan(cls, path: Path) -> "Job":
        return cls(kind="scan", path=path)


Submit = Callable[[Job], None]


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _list_dir(path: Path) -> list[tuple[str, bool]]:
    entries: list[tuple[str, bool]] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            entries.append((entry.name, is_dir))
    entries.sort()
    return entries


async def dispatch_path(path: Path, ctx: SearchContext, submit: Submit) -> None:
    """Expand one path into child jobs, or into a scan if it is not a directory."""
    logger = ctx.logger
    if ctx.exclusions.excluded(path):
        logger.debug("dispatch.skip.excluded", path=str(path))
        return

    logger.debug("dispatch.enter", path=str(path))
    if not await asyncio.to_thread(_is_dir, path):
        submit(Job.scan(path))
        return

    try:
        entries = await asyncio.to_thread(_list_dir, path)
    except OSError as exc:
        logger.debug("dispatch.list.failed", path=str(path), error=str(exc))
        ctx.summary.errors += 1
        return
    ctx.summary.dirs_visited += 1

    for name, is_dir in entries:
        child = path / name
        if is_dir:
            submit(Job.dispatch(child))
        elif ctx.settings.by_name:
            if ctx.matcher.matches(str(child)):
                await ctx.emit(str(child))
        else:
            submit(Job.scan(child))


class SearchPool:
    """Fixed set of workers draining an unbounded queue of pending jobs.

    Every job is counted before it is queued and uncounted only after it
    has finished, including all of its pushes into the result buffer.
    """

    def __init__(self, ctx: SearchContext) -> None:
        self._ctx = ctx
        self._queue: asyncio.Queue[Job] = asyncio.Queue()
        self._workers: list[asyncio.Task[None]] = []

    def submit(self, job: Job) -> None:
        self._ctx.counter.add()
        self._queue.put_nowait(job)

    def start(self) -> None:
        for index in range(self._ctx.settings.workers):
            self._workers.append(
                asyncio.create_task(self._worker(), name=f"dive-worker-{index}")
            )

    async def close(self) -> None:
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers.clear()

    async def _worker(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._run(job)
            except Exception as exc:
                self._ctx.logger.error(
                    "job.failed",
                    kind=job.kind,
                    path=str(job.path),
                    error=str(exc),
                )
                self._ctx.summary.errors += 1
            finally:
                self._ctx.counter.done()

    async def _run(self, job: Job) -> None:
        if job.kind == "scan":
            await scan_file(job.path, self._ctx)
        else:
            await dispatch_path(job.path, self._ctx, self.submit)
