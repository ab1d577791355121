"""
Distributions package: uncertainty settings and sampling for Monte Carlo runs.

  1. sampler.py     DistributionSampler draws, UncertainVariable / DistributionSettings,
                    MonteCarloSampler → SampledPaths
  2. benchmarks.py  default ranges around a base case, scatter variations
"""

from .benchmarks import SCATTER_VARIATIONS, default_production_settings
from .sampler import (
    DistributionSampler,
    DistributionSettings,
    MonteCarloSampler,
    SampledPaths,
    UncertainVariable,
    apply_path,
)

__all__ = [
    "SCATTER_VARIATIONS",
    "default_production_settings",
    "DistributionSampler",
    "DistributionSettings",
    "MonteCarloSampler",
    "SampledPaths",
    "UncertainVariable",
    "apply_path",
]
