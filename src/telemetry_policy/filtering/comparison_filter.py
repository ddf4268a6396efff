"""
Integer comparison filters on response status code and request duration
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from ..runtime import RuntimeLookup, get_integer
from .base import EvaluationContext, FilterResult, LogFilter


class ComparisonOp(Enum):
    EQ = "EQ"
    GE = "GE"


@dataclass(frozen=True)
class RuntimeUInt32:
    """Unsigned operand with an optional runtime override"""

    default_value: int
    runtime_key: str = ""

    def resolve(self, lookup: RuntimeLookup) -> int:
        if not self.runtime_key:
            return self.default_value
        return get_integer(lookup, self.runtime_key, self.default_value)

    def __str__(self) -> str:
        if self.runtime_key:
            return f"{self.default_value} (runtime: {self.runtime_key})"
        return str(self.default_value)


@dataclass(frozen=True)
class ComparisonFilter:
    """Comparison of some context value against a runtime-overridable operand"""

    op: ComparisonOp
    value: RuntimeUInt32

    def compare(self, lhs: int, lookup: RuntimeLookup) -> bool:
        rhs = self.value.resolve(lookup)
        if self.op is ComparisonOp.GE:
            return lhs >= rhs
        return lhs == rhs

    @property
    def symbol(self) -> str:
        return ">=" if self.op is ComparisonOp.GE else "=="

    @classmethod
    def create(
        cls, op: Union[ComparisonOp, str], value: int, runtime_key: str = ""
    ) -> "ComparisonFilter":
        if isinstance(op, str):
            op = ComparisonOp(op.upper())
        return cls(op=op, value=RuntimeUInt32(value, runtime_key))

    def to_dict(self) -> Dict[str, Any]:
        value: Dict[str, Any] = {"default_value": self.value.default_value}
        if self.value.runtime_key:
            value["runtime_key"] = self.value.runtime_key
        return {"op": self.op.value, "value": value}


@dataclass(frozen=True)
class StatusCodeFilter(LogFilter):
    """Filter on the HTTP response code (0 when no response was sent)"""

    comparison: ComparisonFilter
    kind = "status_code_filter"

    def evaluate(self, context: EvaluationContext) -> bool:
        return self.comparison.compare(context.status_code, context.runtime_lookup)

    def explain(self, context: EvaluationContext) -> FilterResult:
        should_log = self.evaluate(context)
        return FilterResult(
            should_log=should_log,
            reason=f"{self.kind}: {context.status_code} "
            f"{self.comparison.symbol if should_log else 'fails ' + self.comparison.symbol} "
            f"{self.comparison.value}",
        )

    @classmethod
    def create(cls, op: Union[ComparisonOp, str], value: int, runtime_key: str = "") -> "StatusCodeFilter":
        return cls(ComparisonFilter.create(op, value, runtime_key))


@dataclass(frozen=True)
class DurationFilter(LogFilter):
    """Filter on total request duration in milliseconds"""

    comparison: ComparisonFilter
    kind = "duration_filter"

    def evaluate(self, context: EvaluationContext) -> bool:
        return self.comparison.compare(context.duration_ms, context.runtime_lookup)

    def explain(self, context: EvaluationContext) -> FilterResult:
        should_log = self.evaluate(context)
        return FilterResult(
            should_log=should_log,
            reason=f"{self.kind}: {context.duration_ms}ms "
            f"{self.comparison.symbol if should_log else 'fails ' + self.comparison.symbol} "
            f"{self.comparison.value}",
        )

    @classmethod
    def create(cls, op: Union[ComparisonOp, str], value: int, runtime_key: str = "") -> "DurationFilter":
        return cls(ComparisonFilter.create(op, value, runtime_key))
