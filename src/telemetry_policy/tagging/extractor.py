"""
Extraction of dimensional tags from flat stat names
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .catalog import DEFAULT_TAG_CATALOG, DefaultTagCatalog
from .rules import CompiledTagRule, TagRule

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Tag-extracted name and the tags removed from it"""

    tag_extracted_name: str
    tags: Dict[str, str] = field(default_factory=dict)


class TagExtractor:
    """Applies an ordered list of tag rules to stat names

    Each rule runs against the name as left by the rules before it. When a
    rule matches, the text of its first capture group is cut out of the name
    and the tag value is taken from the second capture group, or the first
    if there is no second. Rule order is therefore part of the contract:
    an earlier rule can remove text a later rule would have matched.

    The rule list is fixed at construction, so one extractor can be shared by
    any number of threads. Regexes are user supplied and a pathological one
    can make ``extract`` slow; no time limit is applied.
    """

    def __init__(self, rules: Sequence[CompiledTagRule]):
        self._rules: Tuple[CompiledTagRule, ...] = tuple(rules)

    @classmethod
    def build(
        cls,
        custom_rules: Iterable[TagRule] = (),
        use_defaults: bool = True,
        catalog: DefaultTagCatalog = DEFAULT_TAG_CATALOG,
    ) -> "TagExtractor":
        """Validate the rules and build an extractor

        Raises ``ConfigurationError`` if a name is repeated, a rule has no
        usable regex, or a regex has no capture group.
        """
        from ..validation import ConfigValidator

        rules = ConfigValidator.validate_tag_rules(
            list(custom_rules), use_defaults=use_defaults, catalog=catalog
        )
        logger.debug("Built tag extractor with %d rules", len(rules))
        return cls(rules)

    @property
    def rules(self) -> Tuple[CompiledTagRule, ...]:
        return self._rules

    @property
    def tag_names(self) -> List[str]:
        return [rule.name for rule in self._rules]

    def extract(self, stat_name: str) -> ExtractionResult:
        """Split ``stat_name`` into a tag-extracted name and its tags"""
        name = stat_name
        tags: Dict[str, str] = {}
        for rule in self._rules:
            applied = rule.apply(name)
            if applied is None:
                continue
            name, tags[rule.name] = applied
        return ExtractionResult(tag_extracted_name=name, tags=tags)

    def extract_tag(self, stat_name: str, tag_name: str) -> Optional[str]:
        """Return the value of a single tag, or None if it was not extracted"""
        return self.extract(stat_name).tags.get(tag_name)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"TagExtractor({self.tag_names!r})"
