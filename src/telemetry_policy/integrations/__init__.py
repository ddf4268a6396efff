"""
Optional third-party integrations
"""

__all__ = []

# OpenTelemetry integration
try:
    from .opentelemetry import HAS_OPENTELEMETRY, TaggedMetricsConfig, TaggedMetricsRecorder

    __all__.extend(["HAS_OPENTELEMETRY", "TaggedMetricsConfig", "TaggedMetricsRecorder"])
except ImportError:
    HAS_OPENTELEMETRY = False
