"""
Telemetry Policy

Declarative policies over proxy telemetry: dimensional tag extraction from
flat stat names and boolean access log filters with consistent sampling.
"""

__version__ = "0.3.0"

from .config import (
    TelemetryPolicy,
    TelemetryPolicyConfig,
    get_default_config,
    set_default_config,
)
from .errors import (
    ConfigurationError,
    DuplicateTagError,
    EmptyKeyError,
    InvalidOperandError,
    InvalidTagRuleError,
    UnknownFilterError,
)
from .filtering import (
    AndFilter,
    ComparisonFilter,
    ComparisonOp,
    DurationFilter,
    EvaluationContext,
    FilterConfig,
    FilterResult,
    LogFilter,
    LogFilterEvaluator,
    NotHealthCheckFilter,
    OrFilter,
    RuntimeFilter,
    RuntimeUInt32,
    StatusCodeFilter,
    TraceableFilter,
    evaluate,
    filter_from_dict,
)
from .logging_filter import AccessLogRecordFilter
from .runtime import EnvironmentRuntime, RuntimeLookup, StaticRuntime
from .tagging import (
    DEFAULT_TAG_CATALOG,
    DefaultTagCatalog,
    ExtractionResult,
    StatsConfig,
    TagExtractor,
    TagNames,
    TagRule,
)
from .validation import ConfigValidator

__all__ = [
    # Configuration
    "TelemetryPolicy",
    "TelemetryPolicyConfig",
    "get_default_config",
    "set_default_config",
    # Errors
    "ConfigurationError",
    "DuplicateTagError",
    "EmptyKeyError",
    "InvalidOperandError",
    "InvalidTagRuleError",
    "UnknownFilterError",
    # Access log filtering
    "AndFilter",
    "ComparisonFilter",
    "ComparisonOp",
    "DurationFilter",
    "EvaluationContext",
    "FilterConfig",
    "FilterResult",
    "LogFilter",
    "LogFilterEvaluator",
    "NotHealthCheckFilter",
    "OrFilter",
    "RuntimeFilter",
    "RuntimeUInt32",
    "StatusCodeFilter",
    "TraceableFilter",
    "evaluate",
    "filter_from_dict",
    "AccessLogRecordFilter",
    # Runtime
    "EnvironmentRuntime",
    "RuntimeLookup",
    "StaticRuntime",
    # Tag extraction
    "DEFAULT_TAG_CATALOG",
    "DefaultTagCatalog",
    "ExtractionResult",
    "StatsConfig",
    "TagExtractor",
    "TagNames",
    "TagRule",
    "ConfigValidator",
]
