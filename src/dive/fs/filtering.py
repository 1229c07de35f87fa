"""Excluded-directory filtering on path base names."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pathspec


class ExclusionFilter:
    def __init__(self, patterns: Iterable[str], *, disabled: bool = False) -> None:
        self.patterns = tuple(patterns)
        self.disabled = disabled
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)

    def excluded(self, path: Path) -> bool:
        if self.disabled:
            return False
        name = path.name
        # "." and filesystem roots have no base name to exclude.
        if not name:
            return False
        return self._spec.match_file(name)
