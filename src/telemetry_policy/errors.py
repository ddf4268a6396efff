"""
Configuration errors raised while building tag extractors and log filters
"""

from typing import Any, Optional


class ConfigurationError(ValueError):
    """Base class for every error raised while loading telemetry policy config"""

    pass


class DuplicateTagError(ConfigurationError):
    """A tag name appears more than once in an extractor's effective rule list"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tag name '{name}' specified twice")


class InvalidTagRuleError(ConfigurationError):
    """A tag rule cannot be turned into a working regex"""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid tag rule '{name}': {reason}")


class InvalidOperandError(ConfigurationError):
    """A comparison filter operand is negative, out of range or unparseable"""

    def __init__(self, value: Any, reason: Optional[str] = None):
        self.value = value
        self.reason = reason or "operand must be an unsigned 32-bit integer"
        super().__init__(f"Invalid comparison operand {value!r}: {self.reason}")


class EmptyKeyError(ConfigurationError):
    """A runtime filter was configured without a runtime key"""

    def __init__(self, node: str = "runtime_filter"):
        self.node = node
        super().__init__(f"{node}: runtime key must not be empty")


class UnknownFilterError(ConfigurationError):
    """A filter specifier names no known filter kind"""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unknown access log filter specifier: {kind!r}")
