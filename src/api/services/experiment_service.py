"""Experiment service."""

import random
import time
from collections.abc import Callable
from datetime import datetime

from loguru import logger
from prometheus_client import CollectorRegistry

from src.config import settings
from src.experimentation import (
    AssignmentSampler,
    ConversionAttributor,
    ExperimentMetricsSink,
    ExperimentRegistry,
)
from src.experimentation.ab_testing import utcnow

SEED_EXPERIMENTS: dict[str, list[str]] = {
    "button_color": ["red", "blue", "green"],
    "title_text": [
        "Showing version 1",
        "This is version 2",
        "Version 3. It is awesome!",
    ],
}


class ExperimentService:
    """Wires the registry, sampler, attributor and metrics sink together."""

    def __init__(
        self,
        metrics_registry: CollectorRegistry | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize experiment service.

        Args:
            metrics_registry: Prometheus registry. Default: process-wide registry.
            rng: Random source. Default: seeded from settings.random_seed,
                or from the current time when unset.
            clock: Current-time source for activation windows.
        """
        if rng is None:
            seed = settings.random_seed
            rng = random.Random(seed if seed is not None else time.time_ns())

        self.registry = ExperimentRegistry()
        self.metrics = ExperimentMetricsSink(metrics_registry)
        self.sampler = AssignmentSampler(self.registry, self.metrics, rng=rng, clock=clock)
        self.attributor = ConversionAttributor(self.registry, self.metrics)
        self._ready = False

    def bootstrap(self, seed: bool | None = None) -> None:
        """Create the seed experiments and mark the service ready.

        Args:
            seed: Create seed experiments. Default: settings.bootstrap_seed_experiments.
        """
        if seed is None:
            seed = settings.bootstrap_seed_experiments

        if seed:
            for name, variants in SEED_EXPERIMENTS.items():
                self.registry.create(name, variants)
        else:
            logger.info("Skipping seed experiments")

        self._ready = True
        logger.info(f"Experiment service ready with {len(self.registry)} experiments")

    @property
    def is_ready(self) -> bool:
        """Check if bootstrap has completed."""
        return self._ready


experiment_service = ExperimentService()


def get_experiment_service() -> ExperimentService:
    """FastAPI dependency returning the process-wide service."""
    return experiment_service
