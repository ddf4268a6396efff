"""
Configuration for stat tag extraction
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError
from .catalog import DEFAULT_TAG_CATALOG, DefaultTagCatalog
from .extractor import TagExtractor
from .rules import TagRule


@dataclass
class StatsConfig:
    """Configuration for stat tag extraction

    Custom ``stats_tags`` are applied after the default tags when
    ``use_all_default_tags`` is set.
    """

    stats_tags: List[TagRule] = field(default_factory=list)
    use_all_default_tags: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "StatsConfig":
        """Create a config from a ``stats_config`` block"""
        data = data or {}
        tags = data.get("stats_tags") or []
        if not isinstance(tags, list):
            raise ConfigurationError("stats_tags must be a list")
        for tag in tags:
            if not isinstance(tag, dict):
                raise ConfigurationError(f"stats_tags entry must be a mapping, got {tag!r}")

        use_defaults = data.get("use_all_default_tags")
        return cls(
            stats_tags=[TagRule.from_dict(tag) for tag in tags],
            use_all_default_tags=True if use_defaults is None else bool(use_defaults),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats_tags": [rule.to_dict() for rule in self.stats_tags],
            "use_all_default_tags": self.use_all_default_tags,
        }

    def create_extractor(self, catalog: DefaultTagCatalog = DEFAULT_TAG_CATALOG) -> TagExtractor:
        return TagExtractor.build(
            self.stats_tags, use_defaults=self.use_all_default_tags, catalog=catalog
        )
