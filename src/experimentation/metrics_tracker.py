"""Metrics tracking for A/B experiments.

Counts assignments and conversions per (experiment, variant index) as
Prometheus counters, scraped through the API's /metrics endpoint.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    generate_latest,
)

from src.config import settings

ASSIGNMENT = "assignment"
CONVERSION = "conversion"

DROP_UNKNOWN_EXPERIMENT = "unknown_experiment"
DROP_UNKNOWN_VARIANT = "unknown_variant"


def _sample_name(name: str) -> str:
    """Name of the exported sample of a counter."""
    return name if name.endswith("_total") else f"{name}_total"


class ExperimentMetricsSink:
    """Write-only counters for experiment events.

    Both experiment counters are labelled with the experiment name and the
    variant index as a string, so label cardinality is bounded by
    experiments x variants.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize sink.

        Args:
            registry: Prometheus registry to register counters on.
                Default: the process-wide registry.
        """
        self.registry = registry if registry is not None else REGISTRY

        self.assignments = Counter(
            settings.assignment_metric_name,
            "The total number of experiment assignments",
            ["experiment", "version"],
            registry=self.registry,
        )
        self.conversions = Counter(
            settings.conversion_metric_name,
            "The total number of conversions",
            ["experiment", "version"],
            registry=self.registry,
        )
        self.dropped_conversions = Counter(
            settings.dropped_conversion_metric_name,
            "Conversions ignored because experiment or variant is unknown",
            ["reason"],
            registry=self.registry,
        )

        self._sample_names = {
            ASSIGNMENT: _sample_name(settings.assignment_metric_name),
            CONVERSION: _sample_name(settings.conversion_metric_name),
        }
        self._dropped_sample_name = _sample_name(settings.dropped_conversion_metric_name)

    def record_assignment(self, experiment: str, index: int) -> None:
        """Count one assignment of variant ``index``."""
        self.assignments.labels(experiment=experiment, version=str(index)).inc()

    def record_conversion(self, experiment: str, index: int) -> None:
        """Count one conversion of variant ``index``."""
        self.conversions.labels(experiment=experiment, version=str(index)).inc()

    def record_dropped_conversion(self, reason: str) -> None:
        """Count one conversion that could not be attributed."""
        self.dropped_conversions.labels(reason=reason).inc()

    def value(self, family: str, experiment: str, index: int) -> float:
        """Read back a counter cell. Unset cells read as 0."""
        sample = self.registry.get_sample_value(
            self._sample_names[family],
            {"experiment": experiment, "version": str(index)},
        )
        return sample or 0.0

    def dropped(self, reason: str) -> float:
        """Read back the dropped-conversion count for ``reason``."""
        sample = self.registry.get_sample_value(
            self._dropped_sample_name, {"reason": reason}
        )
        return sample or 0.0

    def exposition(self) -> tuple[bytes, str]:
        """Render all metrics of the registry in Prometheus text format."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
