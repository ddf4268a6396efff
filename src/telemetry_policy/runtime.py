"""
Runtime value lookups used to override filter operands and sampling rates

A runtime lookup is any callable taking a runtime key and returning the raw
value for it, or None when the key is not set. Lookups are expected to be
fast, synchronous and free of side effects.
"""

import os
from typing import Any, Callable, Mapping, Optional

RuntimeLookup = Callable[[str], Optional[Any]]

ENV_PREFIX = "TELEMETRY_POLICY_RUNTIME_"


def no_runtime(key: str) -> None:
    """Lookup that never has a value"""
    return None


def _parse_unsigned(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() and raw >= 0 else None
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        text = text.strip()
        # isdigit alone accepts non-ASCII digits such as superscripts
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def get_integer(lookup: RuntimeLookup, key: str, default: int) -> int:
    """Return the unsigned integer stored under ``key``, or ``default``

    Values that are missing, negative or unparseable fall back to ``default``.
    """
    if not key:
        return default
    value = _parse_unsigned(lookup(key))
    return default if value is None else value


def get_percentage(lookup: RuntimeLookup, key: str, default: int = 0) -> int:
    """Return a percentage in [0, 100] stored under ``key``"""
    return min(get_integer(lookup, key, default), 100)


class StaticRuntime:
    """Runtime lookup over a fixed snapshot of values"""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = dict(values or {})

    def __call__(self, key: str) -> Optional[Any]:
        return self._values.get(key)

    def with_values(self, overrides: Mapping[str, Any]) -> "StaticRuntime":
        """Return a new snapshot with ``overrides`` applied on top of this one"""
        values = dict(self._values)
        values.update(overrides)
        return StaticRuntime(values)

    def __repr__(self) -> str:
        return f"StaticRuntime({self._values!r})"


class EnvironmentRuntime:
    """Runtime lookup backed by environment variables

    The key ``access_log.sample_rate`` is read from
    ``TELEMETRY_POLICY_RUNTIME_ACCESS_LOG_SAMPLE_RATE``.
    """

    def __init__(self, prefix: str = ENV_PREFIX):
        self.prefix = prefix

    def variable_name(self, key: str) -> str:
        return self.prefix + key.replace(".", "_").replace("-", "_").upper()

    def __call__(self, key: str) -> Optional[str]:
        return os.getenv(self.variable_name(key))
