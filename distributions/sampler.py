"""
Monte Carlo Sampler: generates N sets of uncertain project inputs.

Input:  Base ProjectParameters + DistributionSettings (triangular ranges per variable)
Output: (N × k) table of sampled inputs, one row per path, one column per active variable

Each row is one plausible reservoir outcome:
  Path 1: peak=171 kbpd, plateau=3.4y, decline=9.1%   (weak reservoir)
  Path 2: peak=205 kbpd, plateau=5.6y, decline=6.2%   (strong reservoir)

Variables are sampled independently. Inactive variables are not sampled and
keep their base value. The sampler never mutates the base parameters; each
path is applied with ProjectParameters.with_overrides().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from core.config import ProjectParameters


class DistributionSampler:
    """
    Scalar and vector draws from a pluggable numpy Generator.

    All methods accept ``size`` (None → float, int → array).
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def triangular(self, low: float, mode: float, high: float, size=None):
        low, high = min(low, high), max(low, high)
        mode = min(max(mode, low), high)
        if high - low <= 0:
            return mode if size is None else np.full(size, float(mode))
        return self.rng.triangular(low, mode, high, size=size)

    def normal(self, mean: float, std: float, size=None):
        return self.rng.normal(mean, max(std, 0.0), size=size)

    def uniform(self, low: float, high: float, size=None):
        return self.rng.uniform(low, high, size=size)

    def vary(self, value: float, range_pct: float, size=None):
        """``value`` scaled by a uniform factor in [1 − range%, 1 + range%]."""
        return value * (1.0 + self.uniform(-range_pct, range_pct, size=size) / 100.0)

    def integer(self, low: int, high: int, size=None):
        """Uniform integer in [low, high], both inclusive."""
        low, high = int(low), int(high)
        if high < low:
            low, high = high, low
        return self.rng.integers(low, high + 1, size=size)


@dataclass(frozen=True)
class UncertainVariable:
    """Triangular(min, mode, max) range for one input; sampled only when active."""
    min: float
    mode: float
    max: float
    active: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UncertainVariable":
        return cls(
            min=float(data["min"]),
            mode=float(data["mode"]),
            max=float(data["max"]),
            active=bool(data.get("active", True)),
        )


# ProjectParameters field → wire name used by the presentation layer.
_SETTING_WIRE_NAMES = {
    "peak_production": "peakProduction",
    "plateau_duration": "plateauDuration",
    "decline_rate": "declineRate",
    "bsw_breakthrough": "bswBreakthrough",
    "bsw_growth_rate": "bswGrowthRate",
}


@dataclass(frozen=True)
class DistributionSettings:
    """
    Production uncertainty ranges for Monte Carlo.

    Can be built from:
    - benchmarks.default_production_settings(params)
    - DistributionSettings.from_dict(wire_settings)
    """
    peak_production: Optional[UncertainVariable] = None
    plateau_duration: Optional[UncertainVariable] = None
    decline_rate: Optional[UncertainVariable] = None
    bsw_breakthrough: Optional[UncertainVariable] = None
    bsw_growth_rate: Optional[UncertainVariable] = None

    def active_variables(self) -> Dict[str, UncertainVariable]:
        out = {}
        for name in _SETTING_WIRE_NAMES:
            var = getattr(self, name)
            if var is not None and var.active:
                out[name] = var
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DistributionSettings":
        """Accepts snake_case or camelCase keys; unknown keys are ignored."""
        kwargs = {}
        for name, wire in _SETTING_WIRE_NAMES.items():
            raw = data.get(name, data.get(wire))
            if raw is None:
                continue
            kwargs[name] = raw if isinstance(raw, UncertainVariable) else UncertainVariable.from_dict(raw)
        return cls(**kwargs)

    def summary(self) -> pd.DataFrame:
        """Return a summary table of all distribution settings."""
        rows = []
        for name in _SETTING_WIRE_NAMES:
            var = getattr(self, name)
            if var is None:
                continue
            rows.append({"Variable": name, "Min": var.min, "Mode": var.mode,
                         "Max": var.max, "Active": var.active})
        return pd.DataFrame(rows)


@dataclass
class SampledPaths:
    """
    Output of Monte Carlo sampling: N paths of sampled input overrides.

    This is the (N × k) table that feeds into the engine runner.
    """
    values: Dict[str, np.ndarray] = field(default_factory=dict)
    n: int = 0

    @property
    def n_paths(self) -> int:
        return self.n

    def to_dataframe(self) -> pd.DataFrame:
        data = {"path_id": np.arange(self.n_paths)}
        data.update(self.values)
        return pd.DataFrame(data)

    def get_path(self, path_idx: int) -> Dict[str, float]:
        """Return the overrides for a single path as a dict."""
        return {name: float(arr[path_idx]) for name, arr in self.values.items()}

    def summary(self) -> pd.DataFrame:
        """Percentile summary of sampled paths."""
        pcts = [0.05, 0.10, 0.50, 0.90, 0.95]
        rows = []
        for name, arr in self.values.items():
            row = {"Variable": name, "Mean": np.mean(arr), "Std": np.std(arr)}
            for p in pcts:
                row[f"P{int(p*100):02d}"] = np.percentile(arr, p * 100)
            rows.append(row)
        return pd.DataFrame(rows)


class MonteCarloSampler:
    """
    Generates N independent input paths from distribution settings.

    Usage:
        settings = default_production_settings(params)
        sampler = MonteCarloSampler(settings, n_paths=1000, seed=7)
        paths = sampler.sample()
        # paths.values["peak_production"] → array of 1000 peaks
        # params.with_overrides(**paths.get_path(0)) → path 0 inputs
    """

    def __init__(
        self,
        settings: DistributionSettings,
        n_paths: int = 1000,
        seed: Optional[int] = 7,
        *,
        sampler: Optional[DistributionSampler] = None,
    ):
        self.settings = settings
        self.n_paths = n_paths
        self.sampler = sampler if sampler is not None else DistributionSampler(seed=seed)

    def sample(self) -> SampledPaths:
        values = {}
        for name, var in self.settings.active_variables().items():
            values[name] = np.asarray(
                self.sampler.triangular(var.min, var.mode, var.max, size=self.n_paths),
                dtype=float,
            )
        return SampledPaths(values=values, n=self.n_paths)


def apply_path(base_params: ProjectParameters, paths: SampledPaths, path_idx: int) -> ProjectParameters:
    """Base parameters with one path's sampled inputs applied."""
    overrides = paths.get_path(path_idx)
    if not overrides:
        return base_params
    return base_params.with_overrides(**overrides)
