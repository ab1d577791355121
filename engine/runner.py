"""
Project runner: one deterministic evaluation, or a Monte Carlo batch of them.

Two entry points:
  1. run_project(params)                       → ProjectResult (yearly table + metrics)
  2. run_monte_carlo(params, settings, n)      → MonteCarloResult (P10/P50/P90 bands)

Monte Carlo samples every path's inputs up front (MonteCarloSampler), then runs
the full pipeline once per path on base_params.with_overrides(path). Paths share
nothing but the read-only base parameters. A path that raises, or whose output
needed non-finite sanitization, is logged and discarded; the batch continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from analysis.aggregator import percentile_bands, summarize_distributions, yearly_bands
from analysis.metrics import Metrics, compute_metrics, npv_profile
from core.config import MonteCarloConfig, ProjectParameters
from core.schema import YEAR_RECORD_COLUMNS
from core.utils import finite_or
from distributions.benchmarks import default_production_settings
from distributions.sampler import DistributionSettings, MonteCarloSampler, apply_path

from .cashflow import CashFlowAssembler, YearRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectResult:
    yearly_data: Tuple[YearRecord, ...]
    metrics: Metrics
    npv_profile: Tuple[Tuple[float, float], ...]
    brent_curve: Tuple[float, ...]
    sanitized_fields: Tuple[str, ...] = ()

    @property
    def free_cash_flows(self) -> np.ndarray:
        return np.array([r.free_cash_flow for r in self.yearly_data], dtype=float)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([r.to_dict() for r in self.yearly_data], columns=list(YEAR_RECORD_COLUMNS))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "yearlyData": [r.to_wire() for r in self.yearly_data],
            "metrics": self.metrics.to_wire(),
            "npvProfile": [{"rate": r, "npv": v} for r, v in self.npv_profile],
            "brentCurve": list(self.brent_curve),
        }


def _finalize_metrics(metrics: Metrics, sanitized: List[str]) -> Metrics:
    values = metrics.to_dict()
    for name in ("npv", "investment_efficiency", "discounted_capex"):
        if not np.isfinite(values[name]):
            sanitized.append(f"metrics.{name}")
            logger.warning("Non-finite metric %s replaced by 0", name)
            values[name] = finite_or(values[name], 0.0)
    for name in ("irr", "discounted_payback", "nominal_payback", "spread"):
        if values[name] is not None and not np.isfinite(values[name]):
            values[name] = None
    return Metrics(**values)


def run_project(params: ProjectParameters) -> ProjectResult:
    """
    Evaluate one project.

    Parameters
    ----------
    params : ProjectParameters
        Immutable inputs; never modified

    Returns
    -------
    ProjectResult with project_duration + 2 YearRecords (years 0 .. duration + 1),
    Metrics, the NPV profile and the Brent curve used.
    """
    assembler = CashFlowAssembler(params)
    records, state = assembler.assemble()

    flows = [r.free_cash_flow for r in records]
    metrics = compute_metrics(
        flows,
        params.discount_rate,
        assembler.schedule.discounted_capex(params.discount_rate),
    )
    sanitized = list(state.sanitized)
    metrics = _finalize_metrics(metrics, sanitized)

    logger.debug(
        "Simulated %d years: NPV=%.0f IRR=%s",
        len(records), metrics.npv, "n/a" if metrics.irr is None else f"{metrics.irr:.2f}%",
    )

    return ProjectResult(
        yearly_data=tuple(records),
        metrics=metrics,
        npv_profile=tuple(npv_profile(flows)),
        brent_curve=tuple(float(x) for x in assembler.brent),
        sanitized_fields=tuple(sanitized),
    )


run = run_project


@dataclass
class MonteCarloResult:
    """
    Aggregated Monte Carlo output.

    chart_data : production (MMbbl/yr) bands per production year
    fcf_bands  : free-cash-flow bands for every project year
    reserves   : bands of total produced volume (MMbbl)
    vpl        : NPV bands
    irr        : IRR bands over paths with a defined IRR (None if there are none)
    """
    chart_data: pd.DataFrame
    fcf_bands: pd.DataFrame
    reserves: Dict[str, float]
    vpl: Dict[str, float]
    irr: Optional[Dict[str, float]]
    summary: pd.DataFrame
    sampled_inputs: pd.DataFrame
    n_valid: int
    n_discarded: int
    paths: Optional[List[ProjectResult]] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chartData": self.chart_data.to_dict(orient="records"),
            "reserves": dict(self.reserves),
            "vpl": dict(self.vpl),
            "irr": dict(self.irr) if self.irr is not None else None,
            "fcfBands": self.fcf_bands.to_dict(orient="records"),
            "validIterations": self.n_valid,
            "discardedIterations": self.n_discarded,
        }


def run_monte_carlo(
    base_params: ProjectParameters,
    distribution_settings: Union[DistributionSettings, Mapping[str, Any], None] = None,
    iterations: Optional[int] = None,
    *,
    seed: Optional[int] = None,
    config: Optional[MonteCarloConfig] = None,
) -> MonteCarloResult:
    """
    Re-run the full pipeline under sampled reservoir uncertainty.

    Parameters
    ----------
    base_params : ProjectParameters
        Base case; each path overrides only the sampled fields
    distribution_settings : DistributionSettings or wire dict, optional
        Defaults to benchmarks.default_production_settings(base_params)
    iterations, seed : optional
        Override config.iterations / config.seed
    config : MonteCarloConfig, optional

    Raises
    ------
    ValueError
        If iterations < 1, or every path was discarded.
    """
    cfg = config or MonteCarloConfig()
    n_iter = cfg.iterations if iterations is None else int(iterations)
    seed = cfg.seed if seed is None else seed
    if n_iter < 1:
        raise ValueError(f"iterations must be >= 1, got {n_iter}")

    if distribution_settings is None:
        settings = default_production_settings(base_params)
    elif isinstance(distribution_settings, DistributionSettings):
        settings = distribution_settings
    else:
        settings = DistributionSettings.from_dict(distribution_settings)

    paths = MonteCarloSampler(settings, n_paths=n_iter, seed=seed).sample()

    start = base_params.production_start_year
    end = base_params.project_duration
    n_years = base_params.project_duration + 2

    production_rows: List[np.ndarray] = []
    fcf_rows: List[np.ndarray] = []
    npvs: List[float] = []
    irrs: List[float] = []
    kept_paths: List[int] = []
    results: List[ProjectResult] = []
    n_discarded = 0

    # ========= MAIN PATH LOOP =========
    for i in range(n_iter):
        try:
            result = run_project(apply_path(base_params, paths, i))
        except Exception as exc:
            n_discarded += 1
            logger.warning("Monte Carlo iteration %d discarded: %s", i, exc)
            continue
        if result.sanitized_fields:
            n_discarded += 1
            logger.warning(
                "Monte Carlo iteration %d discarded: non-finite values in %s",
                i, ", ".join(result.sanitized_fields),
            )
            continue

        records = result.yearly_data
        if len(records) != n_years:
            n_discarded += 1
            logger.warning("Monte Carlo iteration %d discarded: %d years instead of %d", i, len(records), n_years)
            continue

        production_rows.append(np.array([r.production_mmbbl for r in records[start: end + 1]]))
        fcf_rows.append(result.free_cash_flows)
        npvs.append(result.metrics.npv)
        irrs.append(np.nan if result.metrics.irr is None else result.metrics.irr)
        kept_paths.append(i)
        if cfg.keep_paths:
            results.append(result)

    n_valid = len(npvs)
    logger.info("Monte Carlo finished: %d valid, %d discarded", n_valid, n_discarded)
    if n_valid == 0:
        raise ValueError(f"All {n_iter} Monte Carlo iterations were discarded")

    production = np.vstack(production_rows)
    reserves = production.sum(axis=1)
    irr_values = np.asarray(irrs, dtype=float)
    defined_irr = irr_values[~np.isnan(irr_values)]

    sampled = paths.to_dataframe()
    sampled["valid"] = sampled["path_id"].isin(kept_paths)

    return MonteCarloResult(
        chart_data=yearly_bands(production, range(start, end + 1)),
        fcf_bands=yearly_bands(np.vstack(fcf_rows), range(n_years)),
        reserves=percentile_bands(reserves),
        vpl=percentile_bands(npvs),
        irr=percentile_bands(defined_irr) if len(defined_irr) else None,
        summary=summarize_distributions(
            {"NPV (USD)": npvs, "IRR (%)": irr_values, "Reserves (MMbbl)": reserves},
            percentiles=cfg.percentiles,
        ),
        sampled_inputs=sampled,
        n_valid=n_valid,
        n_discarded=n_discarded,
        paths=results if cfg.keep_paths else None,
    )
