"""
Configuration for access log filtering

Filter trees are written as nested one-of mappings: each filter is a mapping
with exactly one key naming its kind, for example::

    {"and_filter": {"filters": [
        {"status_code_filter": {"comparison": {"op": "GE", "value": {"default_value": 500}}}},
        {"not_health_check_filter": {}},
    ]}}

They are parsed once into typed filter objects.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..errors import ConfigurationError, InvalidOperandError, UnknownFilterError
from .base import LogFilter
from .comparison_filter import (
    ComparisonFilter,
    ComparisonOp,
    DurationFilter,
    RuntimeUInt32,
    StatusCodeFilter,
)
from .composite_filter import AndFilter, OrFilter
from .engine import LogFilterEvaluator
from .request_filter import NotHealthCheckFilter, TraceableFilter
from .sampling_filter import RuntimeFilter

logger = logging.getLogger(__name__)


def _parse_operand(raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidOperandError(raw, "operand must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise InvalidOperandError(raw, "operand is not an integer") from None
    raise InvalidOperandError(raw, "operand must be an integer")


def _parse_comparison(body: Dict[str, Any]) -> ComparisonFilter:
    comparison = body.get("comparison")
    if not isinstance(comparison, dict):
        raise ConfigurationError(f"comparison must be a mapping, got {comparison!r}")
    op_name = comparison.get("op", ComparisonOp.EQ.value)
    try:
        op = ComparisonOp(str(op_name).upper())
    except ValueError:
        raise ConfigurationError(f"Unknown comparison operator: {op_name!r}") from None

    value = comparison.get("value") or {}
    if not isinstance(value, dict):
        # a bare number is shorthand for {"default_value": n}
        value = {"default_value": value}
    return ComparisonFilter(
        op=op,
        value=RuntimeUInt32(
            default_value=_parse_operand(value.get("default_value", 0)),
            runtime_key=value.get("runtime_key", ""),
        ),
    )


def _parse_children(body: Dict[str, Any]) -> list:
    children = body.get("filters") or []
    if not isinstance(children, list):
        raise ConfigurationError("filters must be a list")
    return [filter_from_dict(child) for child in children]


_PARSERS: Dict[str, Callable[[Dict[str, Any]], LogFilter]] = {
    StatusCodeFilter.kind: lambda body: StatusCodeFilter(_parse_comparison(body)),
    DurationFilter.kind: lambda body: DurationFilter(_parse_comparison(body)),
    NotHealthCheckFilter.kind: lambda body: NotHealthCheckFilter(),
    TraceableFilter.kind: lambda body: TraceableFilter(),
    RuntimeFilter.kind: lambda body: RuntimeFilter(body.get("runtime_key", "")),
    AndFilter.kind: lambda body: AndFilter(_parse_children(body)),
    OrFilter.kind: lambda body: OrFilter(_parse_children(body)),
}


def filter_from_dict(data: Dict[str, Any]) -> LogFilter:
    """Parse an ``AccessLogFilter`` mapping into a filter tree

    Children are parsed before their parent, so trees are built bottom-up.
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise ConfigurationError(
            f"Access log filter must have exactly one filter specifier, got {data!r}"
        )
    kind, body = next(iter(data.items()))
    parser = _PARSERS.get(kind)
    if parser is None:
        raise UnknownFilterError(kind)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ConfigurationError(f"{kind} body must be a mapping, got {body!r}")
    return parser(body)


def filter_to_dict(node: LogFilter) -> Dict[str, Any]:
    """Render a filter tree back into its configuration form"""
    if isinstance(node, (StatusCodeFilter, DurationFilter)):
        return {node.kind: {"comparison": node.comparison.to_dict()}}
    if isinstance(node, RuntimeFilter):
        return {node.kind: {"runtime_key": node.runtime_key}}
    if isinstance(node, (AndFilter, OrFilter)):
        return {node.kind: {"filters": [filter_to_dict(child) for child in node.filters]}}
    return {node.kind: {}}


@dataclass
class FilterConfig:
    """Configuration for access log filtering

    With no ``filter`` every entry is logged.
    """

    enabled: bool = True
    filter: Optional[LogFilter] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FilterConfig":
        if not data:
            return cls()
        return cls(enabled=True, filter=filter_from_dict(data))

    def create_evaluator(self) -> LogFilterEvaluator:
        if not self.enabled or self.filter is None:
            # vacuous "and" passes everything
            return LogFilterEvaluator.build(AndFilter())
        return LogFilterEvaluator.build(self.filter)

    @classmethod
    def create_error_config(cls, min_status: int = 500) -> "FilterConfig":
        """Log failed requests that are not health checks"""
        return cls(
            filter=AndFilter(
                [StatusCodeFilter.create(ComparisonOp.GE, min_status), NotHealthCheckFilter()]
            )
        )

    @classmethod
    def create_sampled_config(
        cls, runtime_key: str, slow_request_ms: Optional[int] = None
    ) -> "FilterConfig":
        """Sample non-health-check requests at a runtime-controlled rate

        Requests slower than ``slow_request_ms`` are always logged.
        """
        sampled: LogFilter = AndFilter([NotHealthCheckFilter(), RuntimeFilter(runtime_key)])
        if slow_request_ms is not None:
            sampled = OrFilter([DurationFilter.create(ComparisonOp.GE, slow_request_ms), sampled])
        return cls(filter=sampled)
