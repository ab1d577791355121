from __future__ import annotations

import math
from typing import Iterable

import numpy as np


def finite_or(value, fallback: float = 0.0) -> float:
    """Return ``value`` as a float, or ``fallback`` when it is None, NaN or infinite."""
    if value is None:
        return float(fallback)
    value = float(value)
    return value if math.isfinite(value) else float(fallback)


def discount_factor(rate_pct: float, year: int) -> float:
    """1 / (1 + r)^t with r given in percent."""
    return 1.0 / (1.0 + rate_pct / 100.0) ** year


def gaussian_weights(duration: int, peak_relative: float, concentration: float) -> np.ndarray:
    """
    Normalized bell-shaped disbursement weights over ``duration`` build years.

    ``peak_relative`` is the 1-based peak year, clamped into the build window.
    ``concentration`` is 0-100; the spread shrinks as it grows (10% or less gives
    sigma = duration, 100% gives sigma = duration / 10).
    """
    duration = max(int(duration), 1)
    peak_index = min(max(float(peak_relative) - 1.0, 0.0), duration - 1.0)
    concentration_factor = max(1.0, float(concentration) / 10.0)
    sigma = max(0.1, duration / concentration_factor)

    idx = np.arange(duration, dtype=float)
    weights = np.exp(-((idx - peak_index) ** 2) / (2.0 * sigma * sigma))
    return weights / weights.sum()


def annuity_payment(present_value: float, rate_pct: float, n_years: int) -> float:
    """Level annual payment amortizing ``present_value`` over ``n_years`` (rate guard for r = 0)."""
    if n_years <= 0:
        return 0.0
    r = rate_pct / 100.0
    if abs(r) < 1e-12:
        return float(present_value) / n_years
    return float(present_value) * r / (1.0 - (1.0 + r) ** -n_years)


def logistic_water_cut(t: float, bsw_max_pct: float, breakthrough: float, growth_rate: float) -> float:
    """
    Water cut (fraction) at ``t`` years after first oil.

    Logistic curve saturating at ``bsw_max_pct`` and shifted so it crosses 2% at the
    breakthrough year.
    """
    bsw_max = bsw_max_pct / 100.0
    ratio = bsw_max / 0.02 - 1.0
    offset = math.log(ratio) / growth_rate if ratio > 0 else 0.0
    t_inflection = breakthrough + offset
    exponent = -growth_rate * (t - t_inflection)
    if exponent > 700.0:
        return 0.0
    return bsw_max / (1.0 + math.exp(exponent))


def pearson(x: Iterable[float], y: Iterable[float]) -> float:
    """Pearson correlation; 0 when either series has no variance or fewer than 2 points."""
    x = np.asarray(list(x), dtype=float)
    y = np.asarray(list(y), dtype=float)
    if len(x) < 2:
        return 0.0
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = math.sqrt(float((dx * dx).sum()) * float((dy * dy).sum()))
    if denominator == 0.0:
        return 0.0
    return float((dx * dy).sum()) / denominator
