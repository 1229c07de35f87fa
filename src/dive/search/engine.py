"""Wires the gate, worker pool and collector together for one search run."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import asdict
from typing import TextIO

from dive.config.models import SearchSettings
from dive.fs.filtering import ExclusionFilter
from dive.runtime_logging import RuntimeLogger, get_runtime_logger
from dive.search.collector import ResultCollector
from dive.search.context import SearchContext, SearchSummary
from dive.search.counter import TaskCounter
from dive.search.dispatch import Job, SearchPool
from dive.search.gate import AdmissionGate
from dive.search.pattern import Matcher


async def run_search(
    settings: SearchSettings,
    matcher: Matcher,
    out: TextIO,
    *,
    logger: RuntimeLogger | None = None,
    gate: AdmissionGate | None = None,
) -> SearchSummary:
    logger = logger or get_runtime_logger()
    ctx = SearchContext(
        settings=settings,
        matcher=matcher,
        gate=gate or AdmissionGate(settings.max_files),
        results=asyncio.Queue(maxsize=settings.match_buffer),
        counter=TaskCounter(),
        exclusions=ExclusionFilter(settings.exclude, disabled=settings.all_dirs),
        logger=logger,
    )
    logger.info(
        "search.started",
        paths=[str(path) for path in settings.paths],
        pattern=matcher.raw,
        literal=matcher.literal,
        by_name=settings.by_name,
        max_files=settings.max_files,
        workers=settings.workers,
    )

    pool = SearchPool(ctx)
    # Seed every root before any worker runs so the counter cannot hit zero early.
    for root in settings.paths:
        pool.submit(Job.dispatch(root))

    collector = ResultCollector(
        ctx.results,
        ctx.counter.completed,
        out,
        poll_interval=settings.poll_interval,
        logger=logger,
    )
    pool.start()
    try:
        ctx.summary.emitted = await collector.drain()
    finally:
        await pool.close()

    logger.info("search.finished", **asdict(ctx.summary))
    return ctx.summary


def search(
    settings: SearchSettings,
    matcher: Matcher,
    out: TextIO | None = None,
    *,
    logger: RuntimeLogger | None = None,
) -> SearchSummary:
    return asyncio.run(run_search(settings, matcher, out or sys.stdout, logger=logger))
