import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigurationError
from .filtering import FilterConfig, LogFilterEvaluator
from .tagging import DEFAULT_TAG_CATALOG, DefaultTagCatalog, StatsConfig, TagExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryPolicy:
    """A tag extractor and an access log evaluator built from one configuration

    Both engines are immutable. A new configuration produces a new policy
    object that can replace the old one in a single assignment.
    """

    extractor: TagExtractor
    evaluator: LogFilterEvaluator


@dataclass
class TelemetryPolicyConfig:
    """Configuration for stat tagging and access log filtering"""

    stats_config: StatsConfig = field(default_factory=StatsConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TelemetryPolicyConfig":
        """Create configuration from ``stats_config`` and ``access_log_filter`` blocks"""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")
        try:
            return cls(
                stats_config=StatsConfig.from_dict(data.get("stats_config")),
                filter_config=FilterConfig.from_dict(data.get("access_log_filter")),
            )
        except ConfigurationError as e:
            logger.warning("Rejected telemetry policy configuration: %s", e)
            raise

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "TelemetryPolicyConfig":
        """Create configuration from a JSON file"""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Telemetry policy file %s is not valid JSON: %s", path, e)
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            logger.warning("Cannot read telemetry policy file %s: %s", path, e)
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "TelemetryPolicyConfig":
        """Create configuration from environment variables"""
        config_file = os.getenv("TELEMETRY_POLICY_CONFIG_FILE")
        config = cls.from_json_file(config_file) if config_file else cls()

        if os.getenv("TELEMETRY_POLICY_USE_DEFAULT_TAGS") is not None:
            config.stats_config.use_all_default_tags = cls._parse_bool_env(
                "TELEMETRY_POLICY_USE_DEFAULT_TAGS", "true"
            )
        return config

    def build(self, catalog: DefaultTagCatalog = DEFAULT_TAG_CATALOG) -> TelemetryPolicy:
        """Validate the configuration and build both engines

        Raises ``ConfigurationError`` without building anything if either part
        is invalid.
        """
        try:
            extractor = self.stats_config.create_extractor(catalog)
            evaluator = self.filter_config.create_evaluator()
        except ConfigurationError as e:
            logger.warning("Rejected telemetry policy configuration: %s", e)
            raise
        logger.info(
            "Loaded telemetry policy: %d tag rules, access log filter %s",
            len(extractor),
            evaluator.root.kind,
        )
        return TelemetryPolicy(extractor=extractor, evaluator=evaluator)


_default_config: Optional[TelemetryPolicyConfig] = None


def get_default_config() -> TelemetryPolicyConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = TelemetryPolicyConfig.from_env()
    return _default_config


def set_default_config(config: TelemetryPolicyConfig) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config
