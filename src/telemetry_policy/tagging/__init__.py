"""
Dimensional tag extraction from flat stat names
"""

from .catalog import DEFAULT_TAG_CATALOG, DefaultTag, DefaultTagCatalog, TagNames
from .config import StatsConfig
from .extractor import ExtractionResult, TagExtractor
from .rules import CompiledTagRule, TagRule

__all__ = [
    "DEFAULT_TAG_CATALOG",
    "DefaultTag",
    "DefaultTagCatalog",
    "TagNames",
    "StatsConfig",
    "ExtractionResult",
    "TagExtractor",
    "CompiledTagRule",
    "TagRule",
]
