"""
Structural validation of tag rule lists and access log filter trees

Validation runs once when configuration is loaded. Every problem raises
``ConfigurationError`` or a subclass of it, and no engine is built from a rule list or
filter tree that failed here.
"""

import logging
import re
from typing import Iterable, List, Set, Tuple

from .errors import (
    ConfigurationError,
    DuplicateTagError,
    EmptyKeyError,
    InvalidOperandError,
    InvalidTagRuleError,
)
from .filtering.base import LogFilter
from .filtering.comparison_filter import ComparisonFilter, RuntimeUInt32
from .filtering.sampling_filter import RuntimeFilter
from .tagging.catalog import DEFAULT_TAG_CATALOG, DefaultTagCatalog
from .tagging.rules import CompiledTagRule, TagRule

logger = logging.getLogger(__name__)

UINT32_MAX = 0xFFFFFFFF


class ConfigValidator:
    """Validates tag rules and filter trees before engines are constructed"""

    @staticmethod
    def validate_tag_rules(
        rules: Iterable[TagRule],
        use_defaults: bool = True,
        catalog: DefaultTagCatalog = DEFAULT_TAG_CATALOG,
    ) -> Tuple[CompiledTagRule, ...]:
        """Validate ``rules`` and return the effective compiled rule list

        With ``use_defaults`` the whole catalog comes first, followed by
        ``rules`` in the given order.
        """
        effective: List[Tuple[TagRule, str]] = []
        if use_defaults:
            effective.extend((TagRule(d.name, d.pattern), d.substr) for d in catalog)
        effective.extend((rule, "") for rule in rules)

        seen: Set[str] = set()
        compiled = []
        for rule, substr in effective:
            if not isinstance(rule.name, str):
                raise InvalidTagRuleError(str(rule.name), "tag name must be a string")
            if not rule.name:
                raise InvalidTagRuleError(rule.name, "tag name cannot be empty")
            if rule.name in seen:
                raise DuplicateTagError(rule.name)
            seen.add(rule.name)

            pattern = rule.pattern
            if pattern is not None and not isinstance(pattern, str):
                raise InvalidTagRuleError(rule.name, f"regex must be a string, got {pattern!r}")
            if not pattern:
                default = catalog.get(rule.name)
                if default is None:
                    raise InvalidTagRuleError(
                        rule.name, "no regex specified and no default regex for this name"
                    )
                pattern, substr = default.pattern, default.substr

            compiled.append(CompiledTagRule(rule.name, _compile(rule.name, pattern), substr))

        logger.debug(
            "Validated %d tag rules (%d defaults)",
            len(compiled),
            len(catalog) if use_defaults else 0,
        )
        return tuple(compiled)

    @staticmethod
    def validate_filter_tree(tree: LogFilter) -> None:
        """Check every node of ``tree``

        Raises ``InvalidOperandError`` for a comparison operand outside the
        unsigned 32-bit range, ``EmptyKeyError`` for a runtime filter
        without a key, and ``ConfigurationError`` for a runtime key that is
        not a string.
        """
        if not isinstance(tree, LogFilter):
            raise ConfigurationError(f"Filter tree root is not a filter: {tree!r}")

        count = 0
        stack = [tree]
        while stack:
            node = stack.pop()
            count += 1
            comparison = getattr(node, "comparison", None)
            if isinstance(comparison, ComparisonFilter):
                _check_operand(node.kind, comparison.value)
            if isinstance(node, RuntimeFilter):
                _check_runtime_key(node.kind, node.runtime_key)
                if not node.runtime_key:
                    raise EmptyKeyError(node.kind)
            for child in node.children():
                if not isinstance(child, LogFilter):
                    raise ConfigurationError(f"{node.kind} child is not a filter: {child!r}")
                stack.append(child)

        logger.debug("Validated filter tree with %d nodes", count)


def _compile(name: str, pattern: str) -> "re.Pattern[str]":
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise InvalidTagRuleError(name, f"invalid regex {pattern!r}: {e}") from e
    if regex.groups < 1:
        raise InvalidTagRuleError(name, f"regex {pattern!r} has no capture group")
    return regex


def _check_runtime_key(kind: str, key: object) -> None:
    if not isinstance(key, str):
        raise ConfigurationError(f"{kind}: runtime key must be a string, got {key!r}")


def _check_operand(kind: str, value: RuntimeUInt32) -> None:
    _check_runtime_key(kind, value.runtime_key)
    operand = value.default_value
    if isinstance(operand, bool) or not isinstance(operand, int):
        raise InvalidOperandError(operand, "operand must be an integer")
    if operand < 0:
        raise InvalidOperandError(operand, "operand must not be negative")
    if operand > UINT32_MAX:
        raise InvalidOperandError(operand, "operand exceeds 32 bits")
