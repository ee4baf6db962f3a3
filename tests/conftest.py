"""Pytest fixtures for tests."""

import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from src.api.main import app
from src.api.services.experiment_service import ExperimentService, get_experiment_service
from src.experimentation import (
    AssignmentSampler,
    ConversionAttributor,
    ExperimentMetricsSink,
    ExperimentRegistry,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def metrics() -> ExperimentMetricsSink:
    """Metrics sink on an isolated Prometheus registry."""
    return ExperimentMetricsSink(CollectorRegistry())


@pytest.fixture
def registry() -> ExperimentRegistry:
    """Empty experiment registry."""
    return ExperimentRegistry()


@pytest.fixture
def button_registry(registry) -> ExperimentRegistry:
    """Registry holding the button_color experiment."""
    registry.create("button_color", ["red", "blue", "green"])
    return registry


@pytest.fixture
def sampler(button_registry, metrics) -> AssignmentSampler:
    """Sampler with a seeded random source and a frozen clock."""
    return AssignmentSampler(
        button_registry, metrics, rng=random.Random(42), clock=lambda: NOW
    )


@pytest.fixture
def attributor(button_registry, metrics) -> ConversionAttributor:
    """Attributor over the button_color registry."""
    return ConversionAttributor(button_registry, metrics)


@pytest.fixture
def service() -> ExperimentService:
    """Bootstrapped service with isolated metrics and seeded randomness."""
    service = ExperimentService(
        metrics_registry=CollectorRegistry(),
        rng=random.Random(7),
        clock=lambda: NOW,
    )
    service.bootstrap(seed=True)
    return service


@pytest.fixture
def client(service):
    """Test client wired to the isolated service."""
    app.dependency_overrides[get_experiment_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
