"""A/B Testing Framework for web experiments.

Provides the experiment registry, uniform random variant assignment and
conversion attribution on top of the metrics sink.
"""

import random
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from src.experimentation.metrics_tracker import (
    DROP_UNKNOWN_EXPERIMENT,
    DROP_UNKNOWN_VARIANT,
    ExperimentMetricsSink,
)


class ExperimentError(Exception):
    """Base class for experiment errors."""


class ExperimentNotFoundError(ExperimentError, KeyError):
    """Raised when no experiment is registered under a name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Experiment '{self.name}' not found"


class InvalidExperimentError(ExperimentError, ValueError):
    """Raised when an experiment definition is rejected."""


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Experiment:
    """Immutable experiment definition.

    A variant's position in ``variants`` is its identity in metrics.
    """

    name: str
    variants: tuple[str, ...]
    start_date: datetime | None = None
    end_date: datetime | None = None

    def __post_init__(self):
        """Validate experiment definition."""
        # Accept any sequence but always store a tuple
        object.__setattr__(self, "variants", tuple(self.variants))
        # Naive bounds are taken as UTC
        object.__setattr__(self, "start_date", _as_utc(self.start_date))
        object.__setattr__(self, "end_date", _as_utc(self.end_date))

        if not self.name:
            raise InvalidExperimentError("Experiment name must not be empty")

        if not self.variants:
            raise InvalidExperimentError(
                f"Experiment '{self.name}' must have at least 1 variant"
            )

        if len(set(self.variants)) != len(self.variants):
            raise InvalidExperimentError(
                f"Variant labels of experiment '{self.name}' must be unique"
            )

        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date >= self.end_date
        ):
            raise InvalidExperimentError(
                f"Experiment '{self.name}' start_date must be before end_date"
            )

    def is_active(self, now: datetime) -> bool:
        """Check whether the experiment window contains ``now``."""
        now = _as_utc(now)
        if self.start_date is not None and now < self.start_date:
            return False
        if self.end_date is not None and now >= self.end_date:
            return False
        return True

    def index_of(self, label: str) -> int | None:
        """Get index of the variant with exactly this label."""
        for index, variant in enumerate(self.variants):
            if variant == label:
                return index
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "variants": list(self.variants),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


class ExperimentRegistry:
    """Thread-safe store of experiment definitions.

    Entries are replaced whole under a lock, so readers see either the old
    or the new definition of an experiment, never a mix. Experiments are
    frozen, which makes handing them out to callers safe.

    Usage:
        registry = ExperimentRegistry()
        registry.create("button_color", ["red", "blue", "green"])
        experiment = registry.lookup("button_color")
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._experiments: dict[str, Experiment] = {}
        self._lock = threading.RLock()

    def create(
        self,
        name: str,
        variants: Iterable[str],
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Experiment:
        """Store or replace an experiment.

        Args:
            name: Experiment name.
            variants: Ordered variant labels.
            start_date: Optional start of the activation window.
            end_date: Optional end of the activation window (exclusive).

        Returns:
            The stored experiment.

        Raises:
            InvalidExperimentError: If the definition is invalid. The
                registry is left untouched.
        """
        experiment = Experiment(
            name=name,
            variants=tuple(variants),
            start_date=start_date,
            end_date=end_date,
        )

        with self._lock:
            replaced = name in self._experiments
            self._experiments[name] = experiment

        if replaced:
            logger.warning(f"Replaced experiment: {name}")
        else:
            logger.info(f"Added experiment: {name} {list(experiment.variants)}")

        return experiment

    def lookup(self, name: str) -> Experiment:
        """Get experiment by name.

        Raises:
            ExperimentNotFoundError: If no experiment has that name.
        """
        with self._lock:
            experiment = self._experiments.get(name)
        if experiment is None:
            raise ExperimentNotFoundError(name)
        return experiment

    def get(self, name: str) -> Experiment | None:
        """Get experiment by name or None."""
        with self._lock:
            return self._experiments.get(name)

    def list_experiments(self) -> list[Experiment]:
        """Snapshot of all experiments, in no particular order."""
        with self._lock:
            return list(self._experiments.values())

    def export_config(self) -> dict[str, Any]:
        """Export all experiment definitions.

        Returns:
            Dictionary of experiment definitions keyed by name.
        """
        return {exp.name: exp.to_dict() for exp in self.list_experiments()}

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._experiments

    def __len__(self) -> int:
        with self._lock:
            return len(self._experiments)


class AssignmentSampler:
    """Draws a uniformly random variant per experiment.

    Every draw increments the assignment counter for
    ``(experiment, variant index)``.
    """

    def __init__(
        self,
        registry: ExperimentRegistry,
        metrics: ExperimentMetricsSink,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize sampler.

        Args:
            registry: Experiment registry to draw from.
            metrics: Sink receiving assignment events.
            rng: Random source. Default: seeded once from the current time.
            clock: Returns the current time for activation windows.
        """
        self.registry = registry
        self.metrics = metrics
        self.rng = rng if rng is not None else random.Random(time.time_ns())
        self.clock = clock
        # Serializes draws from concurrent requests
        self._rng_lock = threading.Lock()

    def sample_all(self) -> dict[str, str]:
        """Draw one variant for every active experiment.

        Returns:
            Mapping of experiment name to variant label.
        """
        now = self.clock()
        assignments = {}

        for experiment in self.registry.list_experiments():
            if not experiment.is_active(now):
                continue
            try:
                assignments[experiment.name] = self._draw(experiment)
            except InvalidExperimentError as e:
                logger.error(f"Skipping experiment: {e}")
            except Exception:
                logger.exception(f"Failed to assign experiment '{experiment.name}'")

        return assignments

    def sample(self, name: str) -> str:
        """Draw a variant for a single experiment.

        Raises:
            ExperimentNotFoundError: If no experiment has that name.
        """
        return self._draw(self.registry.lookup(name))

    def _draw(self, experiment: Experiment) -> str:
        if not experiment.variants:
            raise InvalidExperimentError(
                f"Experiment '{experiment.name}' has no variants"
            )

        with self._rng_lock:
            index = self.rng.randrange(len(experiment.variants))

        self.metrics.record_assignment(experiment.name, index)
        return experiment.variants[index]


class ConversionAttributor:
    """Credits conversions to previously assigned variants.

    Unknown experiments and unknown labels are dropped without raising;
    they only show up in the dropped-conversion counter.
    """

    def __init__(self, registry: ExperimentRegistry, metrics: ExperimentMetricsSink):
        self.registry = registry
        self.metrics = metrics

    def attribute(self, name: str, label: str) -> bool:
        """Record a conversion for the variant ``label`` of ``name``.

        Returns:
            True if a conversion was recorded.
        """
        experiment = self.registry.get(name)
        if experiment is None:
            logger.debug(f"Dropped conversion for unknown experiment '{name}'")
            self.metrics.record_dropped_conversion(DROP_UNKNOWN_EXPERIMENT)
            return False

        index = experiment.index_of(label)
        if index is None:
            logger.debug(f"Dropped conversion for unknown variant '{label}' of '{name}'")
            self.metrics.record_dropped_conversion(DROP_UNKNOWN_VARIANT)
            return False

        self.metrics.record_conversion(name, index)
        return True

    def attribute_many(self, assignments: Mapping[str, str] | Iterable[tuple[str, str]]) -> int:
        """Attribute several (experiment, label) pairs independently.

        Returns:
            Number of conversions recorded.
        """
        if isinstance(assignments, Mapping):
            assignments = assignments.items()
        return sum(1 for name, label in assignments if self.attribute(name, label))
