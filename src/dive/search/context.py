"""Per-run state handed to every dispatch and scan job."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from dive.config.models import SearchSettings
from dive.fs.filtering import ExclusionFilter
from dive.runtime_logging import RuntimeLogger
from dive.search.counter import TaskCounter
from dive.search.gate import AdmissionGate
from dive.search.pattern import Matcher


@dataclass(slots=True)
class SearchSummary:
    emitted: int = 0
    files_scanned: int = 0
    files_skipped: int = 0
    dirs_visited: int = 0
    errors: int = 0


@dataclass(slots=True)
class SearchContext:
    settings: SearchSettings
    matcher: Matcher
    gate: AdmissionGate
    results: asyncio.Queue[str]
    counter: TaskCounter
    exclusions: ExclusionFilter
    logger: RuntimeLogger
    summary: SearchSummary = field(default_factory=SearchSummary)

    async def emit(self, record: str) -> None:
        # Blocks while the result buffer is full.
        await self.results.put(record)
