"""
Boolean combinators over other filters
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

from .base import EvaluationContext, FilterResult, LogFilter


@dataclass(frozen=True, init=False)
class AndFilter(LogFilter):
    """Logical "and" over ``filters``

    Filters are evaluated in order and evaluation stops at the first one that
    rejects. An empty list passes.
    """

    filters: Tuple[LogFilter, ...]
    kind = "and_filter"

    def __init__(self, filters: Iterable[LogFilter] = ()):
        object.__setattr__(self, "filters", tuple(filters))

    def evaluate(self, context: EvaluationContext) -> bool:
        return all(f.evaluate(context) for f in self.filters)

    def children(self) -> Tuple[LogFilter, ...]:
        return self.filters

    def explain(self, context: EvaluationContext) -> FilterResult:
        for f in self.filters:
            result = f.explain(context)
            if not result.should_log:
                return FilterResult(False, f"{self.kind} -> {result.reason}", result.metadata)
        return FilterResult(True, f"{self.kind}: all {len(self.filters)} passed")


@dataclass(frozen=True, init=False)
class OrFilter(LogFilter):
    """Logical "or" over ``filters``

    Filters are evaluated in order and evaluation stops at the first one that
    passes. An empty list rejects.
    """

    filters: Tuple[LogFilter, ...]
    kind = "or_filter"

    def __init__(self, filters: Iterable[LogFilter] = ()):
        object.__setattr__(self, "filters", tuple(filters))

    def evaluate(self, context: EvaluationContext) -> bool:
        return any(f.evaluate(context) for f in self.filters)

    def children(self) -> Tuple[LogFilter, ...]:
        return self.filters

    def explain(self, context: EvaluationContext) -> FilterResult:
        for f in self.filters:
            result = f.explain(context)
            if result.should_log:
                return FilterResult(True, f"{self.kind} -> {result.reason}", result.metadata)
        return FilterResult(False, f"{self.kind}: none of {len(self.filters)} passed")
