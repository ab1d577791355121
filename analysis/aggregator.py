"""
Aggregate Monte Carlo iterations into P10 / P50 / P90 summaries.

Oil & gas convention: P10 is the optimistic case (10% chance of doing better)
and P90 the conservative one. With ascending percentiles that means

  P10 = 90th percentile    P50 = median    P90 = 10th percentile

so P90 ≤ P50 ≤ P10 always holds. Percentiles use numpy's linear interpolation.
"""

from __future__ import annotations

from typing import Dict, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd


def exceedance_percentile(values: Sequence[float], p: float) -> float:
    """Value exceeded with probability p% (P10 → 90th percentile)."""
    return float(np.percentile(np.asarray(values, dtype=float), 100.0 - p))


def percentile_bands(
    values: Sequence[float],
    percentiles: Tuple[int, ...] = (10, 50, 90),
) -> Dict[str, float]:
    """{"p10": ..., "p50": ..., "p90": ...} for one sample."""
    return {f"p{int(p)}": exceedance_percentile(values, p) for p in percentiles}


def yearly_bands(
    matrix: np.ndarray,
    years: Sequence[int],
    percentiles: Tuple[int, ...] = (10, 50, 90),
) -> pd.DataFrame:
    """
    Per-year bands from an (n_iterations × n_years) matrix.

    Returns a DataFrame with a ``year`` column plus one column per percentile.
    """
    matrix = np.asarray(matrix, dtype=float)
    data = {"year": list(years)}
    for p in percentiles:
        data[f"p{int(p)}"] = np.percentile(matrix, 100.0 - p, axis=0)
    return pd.DataFrame(data)


def summarize_distributions(
    samples: Mapping[str, Sequence[float]],
    percentiles: Tuple[int, ...] = (10, 50, 90),
) -> pd.DataFrame:
    """
    One row per metric with mean / std / min / P-values / max.

    NaN entries (e.g. undefined IRR) are dropped per metric.
    """
    rows = []
    for label, raw in samples.items():
        values = np.asarray(raw, dtype=float)
        values = values[~np.isnan(values)]
        if len(values) == 0:
            continue
        row = {
            "Metric": label,
            "N": int(len(values)),
            "Mean": float(np.mean(values)),
            "Std Dev": float(np.std(values)),
            "Min": float(np.min(values)),
        }
        for p in percentiles:
            row[f"P{int(p)}"] = exceedance_percentile(values, p)
        row["Max"] = float(np.max(values))
        rows.append(row)
    return pd.DataFrame(rows)
