"""
Tag rule definitions as they appear in stats configuration
"""

from dataclasses import dataclass
from re import Pattern
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TagRule:
    """A named regex that pulls one dimensional tag out of a stat name

    When ``pattern`` is omitted the regex is looked up in the default tag
    catalog by ``name``.
    """

    name: str
    pattern: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagRule":
        """Create a rule from a ``{"tag_name", "regex"}`` or ``{"name", "pattern"}`` block"""
        name = data.get("tag_name", data.get("name", ""))
        pattern = data.get("regex", data.get("pattern"))
        # An empty regex string means "use the default"
        return cls(name=name or "", pattern=pattern or None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tag_name": self.name}
        if self.pattern is not None:
            data["regex"] = self.pattern
        return data


class CompiledTagRule:
    """A validated tag rule with its regex compiled

    Instances are immutable and safe to share between threads.
    """

    __slots__ = ("name", "regex", "substr")

    def __init__(self, name: str, regex: Pattern[str], substr: str = ""):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "regex", regex)
        object.__setattr__(self, "substr", substr)

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def apply(self, stat_name: str) -> Optional[Tuple[str, str]]:
        """Match against ``stat_name``

        Returns ``(name_without_group_1, tag_value)`` or None when the rule
        does not match.
        """
        if self.substr and self.substr not in stat_name:
            return None

        match = self.regex.search(stat_name)
        if match is None:
            return None

        start, end = match.span(1)
        if start < 0:
            # group 1 is optional in this regex and did not take part
            return None

        value = match.group(1)
        if self.regex.groups >= 2 and match.group(2) is not None:
            value = match.group(2)

        return stat_name[:start] + stat_name[end:], value

    def __repr__(self) -> str:
        return f"CompiledTagRule(name={self.name!r}, regex={self.regex.pattern!r})"
