"""
Standard library logging filter driven by an access log filter tree

Request facts are read from log record attributes, either plain
(``status_code``) or with the ``ctx_`` prefix used for structured context
(``ctx_status_code``)::

    logger.addFilter(AccessLogRecordFilter(evaluator, runtime_lookup=runtime))
    logger.info("request done", extra={"status_code": 503, "duration_ms": 12})
"""

import logging
from typing import Any, Optional

from .filtering import EvaluationContext, LogFilterEvaluator
from .runtime import RuntimeLookup


class AccessLogRecordFilter(logging.Filter):
    """Drops log records whose request facts fail the evaluator"""

    def __init__(
        self,
        evaluator: LogFilterEvaluator,
        runtime_lookup: Optional[RuntimeLookup] = None,
        name: str = "",
    ):
        super().__init__(name)
        self.evaluator = evaluator
        self.runtime_lookup = runtime_lookup

    @staticmethod
    def _field(record: logging.LogRecord, key: str, default: Any = None) -> Any:
        value = getattr(record, key, None)
        if value is None:
            value = getattr(record, f"ctx_{key}", None)
        return default if value is None else value

    @classmethod
    def _int_field(cls, record: logging.LogRecord, key: str) -> int:
        # Values come from arbitrary ``extra`` mappings; unparseable ones count as 0
        value = cls._field(record, key, 0)
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return 0

    @classmethod
    def _request_id(cls, record: logging.LogRecord) -> Optional[str]:
        request_id = cls._field(record, "request_id")
        return None if request_id is None else str(request_id)

    def context_for(self, record: logging.LogRecord) -> EvaluationContext:
        """Build the evaluation context for ``record``"""
        return EvaluationContext.from_request(
            status_code=self._int_field(record, "status_code"),
            duration_ms=self._int_field(record, "duration_ms"),
            is_health_check=bool(self._field(record, "is_health_check", False)),
            request_id=self._request_id(record),
            runtime_lookup=self.runtime_lookup,
            is_traceable=self._field(record, "is_traceable"),
        )

    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return False
        return self.evaluator.evaluate(self.context_for(record))
