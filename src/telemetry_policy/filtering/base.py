"""
Base classes for access log filtering
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..runtime import RuntimeLookup, no_runtime

# Position of the trace decision character in an x-request-id UUID
TRACE_BYTE_POSITION = 14
TRACE_SAMPLED = "9"
TRACE_FORCED = "a"
TRACE_CLIENT = "b"


def is_traceable_request_id(request_id: Optional[str]) -> bool:
    """Return True if a UUID request id carries a sampled, forced or client trace mark"""
    if not request_id or len(request_id) != 36:
        return False
    return request_id[TRACE_BYTE_POSITION] in (TRACE_SAMPLED, TRACE_FORCED, TRACE_CLIENT)


@dataclass(frozen=True)
class EvaluationContext:
    """Facts about one request/response exchange, supplied per evaluation"""

    status_code: int = 0
    duration_ms: int = 0
    is_health_check: bool = False
    is_traceable: bool = False
    request_id: Optional[str] = None
    runtime_lookup: RuntimeLookup = field(default=no_runtime, repr=False, compare=False)

    @classmethod
    def from_request(
        cls,
        status_code: Optional[int] = None,
        duration_ms: int = 0,
        is_health_check: bool = False,
        request_id: Optional[str] = None,
        runtime_lookup: Optional[RuntimeLookup] = None,
        is_traceable: Optional[bool] = None,
    ) -> "EvaluationContext":
        """Build a context from raw request facts

        A missing status code (no response was sent) compares as 0. When
        ``is_traceable`` is not given it is derived from the request id.
        """
        if is_traceable is None:
            is_traceable = is_traceable_request_id(request_id)
        return cls(
            status_code=status_code or 0,
            duration_ms=duration_ms,
            is_health_check=is_health_check,
            is_traceable=is_traceable,
            request_id=request_id or None,
            runtime_lookup=runtime_lookup or no_runtime,
        )


@dataclass
class FilterResult:
    """Result of an access log filter decision"""

    should_log: bool
    reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class LogFilter(ABC):
    """A node in an access log filter tree"""

    kind: str = "filter"

    @abstractmethod
    def evaluate(self, context: EvaluationContext) -> bool:
        """Determine if the access log entry should be written"""
        pass

    def children(self) -> Tuple["LogFilter", ...]:
        return ()

    def explain(self, context: EvaluationContext) -> FilterResult:
        """Evaluate and report which node made the decision"""
        should_log = self.evaluate(context)
        return FilterResult(
            should_log=should_log,
            reason=f"{self.kind}: {'passed' if should_log else 'rejected'}",
        )
