"""Literal and regular-expression matching shared by name and content search."""

from __future__ import annotations

import re
from dataclasses import dataclass


class PatternError(ValueError):
    def __init__(self, expression: str, reason: str) -> None:
        super().__init__(f"{reason} in {expression!r}")
        self.expression = expression
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Matcher:
    raw: str
    literal: bool = False
    expr: re.Pattern[str] | None = None

    @classmethod
    def compile(cls, expression: str, *, literal: bool = False) -> "Matcher":
        if literal:
            return cls(raw=expression, literal=True)
        try:
            expr = re.compile(expression)
        except re.error as exc:
            raise PatternError(expression, str(exc)) from exc
        return cls(raw=expression, literal=False, expr=expr)

    def matches(self, candidate: str) -> bool:
        if self.literal or self.expr is None:
            return self.raw in candidate
        return self.expr.search(candidate) is not None
