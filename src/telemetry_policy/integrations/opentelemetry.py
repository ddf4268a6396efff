"""
OpenTelemetry integration for tagged stats

Records counters and histograms under the tag-extracted stat name with the
extracted tags attached as attributes, so that
``cluster.foo.upstream_rq_timeout`` and ``cluster.bar.upstream_rq_timeout``
become one instrument with a ``envoy.cluster_name`` attribute.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

# OpenTelemetry imports with availability checking
try:
    from opentelemetry import metrics

    HAS_OPENTELEMETRY = True
except ImportError:
    metrics = None
    HAS_OPENTELEMETRY = False

from ..tagging import ExtractionResult, TagExtractor


@dataclass
class TaggedMetricsConfig:
    """Configuration for the tagged metrics recorder"""

    meter_name: str = "telemetry_policy"
    name_prefix: str = ""  # Prepended to every instrument name
    counter_unit: str = "1"
    histogram_unit: str = "ms"


class TaggedMetricsRecorder:
    """Records stats through an OpenTelemetry meter after tag extraction"""

    def __init__(
        self,
        extractor: TagExtractor,
        meter: Optional[Any] = None,
        config: Optional[TaggedMetricsConfig] = None,
    ):
        if not HAS_OPENTELEMETRY:
            raise ImportError(
                "opentelemetry-api is required for OpenTelemetry integration. "
                "Install with: pip install telemetry-policy[otel]"
            )

        self.extractor = extractor
        self.config = config or TaggedMetricsConfig()
        self.meter = meter or metrics.get_meter(self.config.meter_name)

        # Instruments are created once per tag-extracted name
        self._counters: Dict[str, Any] = {}
        self._histograms: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _instrument(self, cache: Dict[str, Any], name: str, factory: Callable[..., Any], unit: str) -> Any:
        instrument = cache.get(name)
        if instrument is None:
            with self._lock:
                instrument = cache.get(name)
                if instrument is None:
                    instrument = factory(self.config.name_prefix + name, unit=unit)
                    cache[name] = instrument
        return instrument

    def increment(self, stat_name: str, amount: int = 1) -> ExtractionResult:
        """Add ``amount`` to the counter for ``stat_name``"""
        result = self.extractor.extract(stat_name)
        counter = self._instrument(
            self._counters, result.tag_extracted_name, self.meter.create_counter, self.config.counter_unit
        )
        counter.add(amount, attributes=result.tags)
        return result

    def record(self, stat_name: str, value: Union[int, float]) -> ExtractionResult:
        """Record ``value`` in the histogram for ``stat_name``"""
        result = self.extractor.extract(stat_name)
        histogram = self._instrument(
            self._histograms, result.tag_extracted_name, self.meter.create_histogram, self.config.histogram_unit
        )
        histogram.record(value, attributes=result.tags)
        return result

    @property
    def instrument_names(self) -> Dict[str, list]:
        return {"counters": sorted(self._counters), "histograms": sorted(self._histograms)}
