"""
Sensitivity studies on top of the project engine.

  capex_sensitivity        re-run at −30% .. +30% capex, spread vs investment efficiency
  breakeven_brent          constant Brent price at which NPV = 0 (bracketed brentq)
  run_scatter_monte_carlo  uniform ± variation of capex/production/opex inputs,
                           spread vs investment efficiency with a trend line

Every study works on copies made with ProjectParameters.with_overrides(); the
base parameters are never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.optimize import brentq

from core.config import ProjectParameters
from core.schema import BrentStrategy
from core.utils import pearson
from distributions.benchmarks import SCATTER_VARIATIONS
from distributions.sampler import DistributionSampler
from engine.runner import run_project

logger = logging.getLogger(__name__)

CAPEX_VARIATIONS: Tuple[int, ...] = (-30, -20, -10, 0, 10, 20, 30)


def trend_line(x: Sequence[float], y: Sequence[float]) -> List[Tuple[float, float]]:
    """Least-squares line evaluated at min(x) and max(x); empty with < 2 points or no x variance."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(x) < 2 or np.ptp(x) == 0:
        return []
    slope, intercept = np.polyfit(x, y, 1)
    lo, hi = float(x.min()), float(x.max())
    return [(lo, float(slope * lo + intercept)), (hi, float(slope * hi + intercept))]


@dataclass(frozen=True)
class CapexSensitivity:
    table: pd.DataFrame  # variation, capex, irr, spread, investment_efficiency, is_base
    correlation: float  # Pearson r between spread and investment efficiency


def capex_sensitivity(
    params: ProjectParameters,
    variations: Sequence[int] = CAPEX_VARIATIONS,
) -> CapexSensitivity:
    """
    Re-run the project with total capex scaled by each variation (in percent).

    Rows whose IRR is undefined are dropped; the table is sorted by spread.
    """
    rows = []
    for variation in variations:
        capex = params.total_capex * (1 + variation / 100.0)
        metrics = run_project(params.with_overrides(total_capex=capex)).metrics
        if metrics.irr is None:
            continue
        rows.append({
            "variation": variation,
            "capex": capex,
            "irr": metrics.irr,
            "spread": metrics.irr - params.discount_rate,
            "investment_efficiency": metrics.investment_efficiency,
            "is_base": variation == 0,
        })

    columns = ["variation", "capex", "irr", "spread", "investment_efficiency", "is_base"]
    table = pd.DataFrame(rows, columns=columns).sort_values("spread").reset_index(drop=True)
    correlation = pearson(table["spread"], table["investment_efficiency"]) if len(table) > 1 else 0.0
    return CapexSensitivity(table=table, correlation=correlation)


@dataclass(frozen=True)
class BreakevenResult:
    status: str  # "solved" | "no_root"
    value: Optional[float]  # Brent $/bbl
    npv_low: float
    npv_high: float
    iterations: int
    message: str


def _npv_at_brent(params: ProjectParameters, price: float) -> float:
    scenario = params.with_overrides(brent_price=price, brent_strategy=BrentStrategy.CONSTANT)
    return run_project(scenario).metrics.npv


def breakeven_brent(
    params: ProjectParameters,
    low: float = 0.0,
    high: float = 200.0,
    *,
    xtol: float = 1e-6,
    max_iter: int = 100,
) -> BreakevenResult:
    """
    Constant Brent price at which project NPV is zero.

    The bracket [low, high] is checked for a sign change first; without one an
    explicit "no_root" result is returned instead of a midpoint.
    """
    npv_low = _npv_at_brent(params, low)
    npv_high = _npv_at_brent(params, high)

    if npv_low == 0:
        return BreakevenResult("solved", low, npv_low, npv_high, 0, "Solved at lower bound.")
    if npv_high == 0:
        return BreakevenResult("solved", high, npv_low, npv_high, 0, "Solved at upper bound.")
    if npv_low * npv_high > 0:
        logger.warning(
            "No break-even Brent in [%.1f, %.1f]: NPV %.0f .. %.0f", low, high, npv_low, npv_high
        )
        return BreakevenResult(
            "no_root", None, npv_low, npv_high, 0,
            "NPV does not change sign in the selected price range.",
        )

    root, info = brentq(
        lambda price: _npv_at_brent(params, price),
        low, high, xtol=xtol, maxiter=max_iter, full_output=True, disp=False,
    )
    if not info.converged:
        return BreakevenResult(
            "no_root", None, npv_low, npv_high, info.iterations,
            f"Solver did not converge: {info.flag}",
        )
    return BreakevenResult("solved", float(root), npv_low, npv_high, info.iterations, "Converged.")


@dataclass(frozen=True)
class ScatterResult:
    points: pd.DataFrame  # id, spread, investment_efficiency
    correlation: float
    trend_line: List[Tuple[float, float]]
    n_discarded: int


def _scatter_overrides(params: ProjectParameters, sampler: DistributionSampler) -> dict:
    overrides = {}
    for name, variation in SCATTER_VARIATIONS.items():
        value = float(sampler.vary(getattr(params, name), variation.range_pct))
        if variation.clamp_pct:
            value = min(100.0, max(0.0, value))
        overrides[name] = value

    duration = params.capex_duration
    ramp = int(round(params.ramp_up_duration))
    plateau = int(round(params.plateau_duration))
    overrides["capex_peak_relative"] = int(sampler.integer(1, duration))
    overrides["ramp_up_duration"] = max(1, int(sampler.integer(max(1, ramp - 1), ramp + 2)))
    overrides["plateau_duration"] = max(1, int(sampler.integer(max(1, plateau - 1), plateau + 2)))
    return overrides


def run_scatter_monte_carlo(
    params: ProjectParameters,
    iterations: int = 500,
    *,
    seed: Optional[int] = 7,
    sampler: Optional[DistributionSampler] = None,
) -> ScatterResult:
    """
    Joint variation of capex, phasing, production and opex inputs.

    Keeps (spread, investment efficiency) for every iteration with a defined IRR.
    """
    sampler = sampler if sampler is not None else DistributionSampler(seed=seed)
    rows = []
    n_discarded = 0

    for i in range(iterations):
        metrics = run_project(params.with_overrides(**_scatter_overrides(params, sampler))).metrics
        if metrics.irr is None or not np.isfinite(metrics.investment_efficiency):
            n_discarded += 1
            continue
        rows.append({
            "id": i,
            "spread": metrics.irr - params.discount_rate,
            "investment_efficiency": metrics.investment_efficiency,
        })

    points = pd.DataFrame(rows, columns=["id", "spread", "investment_efficiency"])
    if len(points) > 1:
        correlation = pearson(points["spread"], points["investment_efficiency"])
        line = trend_line(points["spread"], points["investment_efficiency"])
    else:
        correlation, line = 0.0, []
    return ScatterResult(points=points, correlation=correlation, trend_line=line, n_discarded=n_discarded)
