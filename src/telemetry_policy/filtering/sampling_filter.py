"""
Runtime-controlled sampling of access log entries

Sampling pivots on the request id. When one is present every host that sees
the same request id makes the same decision for a given percentage, so a
request is either logged everywhere or nowhere. Without a request id the
decision is an independent random draw.
"""

import hashlib
import random
import string
from dataclasses import dataclass

from ..runtime import get_percentage
from .base import EvaluationContext, FilterResult, LogFilter

_HEX_DIGITS = frozenset(string.hexdigits)


def request_id_sample_value(request_id: str) -> int:
    """Map a request id onto a stable value in [0, 100)

    UUIDs use their leading 32 bits directly so that the value agrees with
    other proxies sampling on the same x-request-id. Any other id is hashed
    with MD5 first.
    """
    prefix = request_id[:8]
    if len(prefix) == 8 and _HEX_DIGITS.issuperset(prefix):
        return int(prefix, 16) % 100

    digest = hashlib.md5(request_id.encode("utf-8")).hexdigest()
    return int(digest[:8], 16) % 100


@dataclass(frozen=True)
class RuntimeFilter(LogFilter):
    """Samples requests at the percentage stored under ``runtime_key``

    The percentage is read from the runtime on every evaluation, ranges over
    0-100 and defaults to 0.
    """

    runtime_key: str
    kind = "runtime_filter"

    def evaluate(self, context: EvaluationContext) -> bool:
        percentage = get_percentage(context.runtime_lookup, self.runtime_key, 0)
        if context.request_id:
            return request_id_sample_value(context.request_id) < percentage
        return random.random() * 100 < percentage

    def explain(self, context: EvaluationContext) -> FilterResult:
        should_log = self.evaluate(context)
        percentage = get_percentage(context.runtime_lookup, self.runtime_key, 0)
        mode = "consistent" if context.request_id else "random"
        return FilterResult(
            should_log=should_log,
            reason=f"{self.kind}: {mode} sampling at {percentage}% ({self.runtime_key})",
            metadata={"sampled": should_log, "percentage": percentage},
        )
