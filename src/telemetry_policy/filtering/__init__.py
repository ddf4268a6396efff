"""
Access log filtering: boolean filter trees over request facts
"""

from .base import EvaluationContext, FilterResult, LogFilter, is_traceable_request_id
from .comparison_filter import (
    ComparisonFilter,
    ComparisonOp,
    DurationFilter,
    RuntimeUInt32,
    StatusCodeFilter,
)
from .composite_filter import AndFilter, OrFilter
from .config import FilterConfig, filter_from_dict, filter_to_dict
from .engine import LogFilterEvaluator, evaluate
from .request_filter import NotHealthCheckFilter, TraceableFilter
from .sampling_filter import RuntimeFilter, request_id_sample_value

__all__ = [
    "EvaluationContext",
    "FilterResult",
    "LogFilter",
    "is_traceable_request_id",
    "ComparisonFilter",
    "ComparisonOp",
    "DurationFilter",
    "RuntimeUInt32",
    "StatusCodeFilter",
    "AndFilter",
    "OrFilter",
    "FilterConfig",
    "filter_from_dict",
    "filter_to_dict",
    "LogFilterEvaluator",
    "evaluate",
    "NotHealthCheckFilter",
    "TraceableFilter",
    "RuntimeFilter",
    "request_id_sample_value",
]
