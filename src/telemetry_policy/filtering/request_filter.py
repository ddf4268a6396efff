"""
Filters on request classification flags
"""

from dataclasses import dataclass

from .base import EvaluationContext, LogFilter


@dataclass(frozen=True)
class NotHealthCheckFilter(LogFilter):
    """Passes requests that were not marked as health checks"""

    kind = "not_health_check_filter"

    def evaluate(self, context: EvaluationContext) -> bool:
        return not context.is_health_check


@dataclass(frozen=True)
class TraceableFilter(LogFilter):
    """Passes requests that are traceable"""

    kind = "traceable_filter"

    def evaluate(self, context: EvaluationContext) -> bool:
        return context.is_traceable
