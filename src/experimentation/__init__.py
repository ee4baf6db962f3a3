"""Experimentation module for web A/B testing.

Components:
- ExperimentRegistry: Thread-safe store of experiment definitions
- AssignmentSampler: Uniform random variant assignment
- ConversionAttributor: Credits conversions back to assigned variants
- ExperimentMetricsSink: Prometheus counters for assignments and conversions
"""

from src.experimentation.ab_testing import (
    AssignmentSampler,
    ConversionAttributor,
    Experiment,
    ExperimentError,
    ExperimentNotFoundError,
    ExperimentRegistry,
    InvalidExperimentError,
)
from src.experimentation.metrics_tracker import ExperimentMetricsSink

__all__ = [
    "AssignmentSampler",
    "ConversionAttributor",
    "Experiment",
    "ExperimentError",
    "ExperimentNotFoundError",
    "ExperimentRegistry",
    "InvalidExperimentError",
    "ExperimentMetricsSink",
]
