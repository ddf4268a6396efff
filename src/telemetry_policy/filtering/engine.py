"""
Evaluator that decides whether an access log entry is written
"""

import logging
from typing import Any, Dict

from .base import EvaluationContext, FilterResult, LogFilter

logger = logging.getLogger(__name__)


def evaluate(tree: LogFilter, context: EvaluationContext) -> bool:
    """Evaluate ``tree`` against one request"""
    return tree.evaluate(context)


class LogFilterEvaluator:
    """Holds a validated filter tree and evaluates requests against it

    The tree is immutable, so one evaluator can be shared by any number of
    threads. The only source of non-determinism is a runtime filter
    evaluated for a request without a request id.
    """

    def __init__(self, root: LogFilter):
        self._root = root

    @classmethod
    def build(cls, root: LogFilter) -> "LogFilterEvaluator":
        """Validate ``root`` and build an evaluator for it

        Raises ``ConfigurationError`` if any node is malformed.
        """
        from ..validation import ConfigValidator

        ConfigValidator.validate_filter_tree(root)
        logger.debug("Built access log filter evaluator for %s", root.kind)
        return cls(root)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogFilterEvaluator":
        """Build an evaluator from an ``AccessLogFilter`` configuration block"""
        from .config import filter_from_dict

        return cls.build(filter_from_dict(data))

    @property
    def root(self) -> LogFilter:
        return self._root

    def evaluate(self, context: EvaluationContext) -> bool:
        return self._root.evaluate(context)

    def explain(self, context: EvaluationContext) -> FilterResult:
        """Evaluate and report which node decided the outcome"""
        return self._root.explain(context)

    def __repr__(self) -> str:
        return f"LogFilterEvaluator({self._root!r})"
