"""
Brent price curve and realised oil price.

Strategies (year 0 = project start):
  constant     flat base price
  market_bull  +5% of base per year through year 5, then flat at +25%
  market_bear  −3% per year compounded, floored at 30 $/bbl
  custom       linear from base to the peak value at the peak year, then
               exponential relaxation toward the long-term price (rate 0.15/yr)
"""

from __future__ import annotations

import math

import numpy as np

from core.config import ProjectParameters
from core.schema import BrentStrategy, ProductionMode

BEAR_FLOOR = 30.0
CUSTOM_DECAY = 0.15
API_REFERENCE = 30.0
API_SENSITIVITY = 0.004  # price change per degree API away from the reference


def brent_curve(params: ProjectParameters) -> np.ndarray:
    """Brent price ($/bbl) for years 0 .. project_duration + 5."""
    base = params.brent_price
    peak_year = params.brent_peak_year
    peak_value = params.brent_peak_value
    long_term = params.brent_long_term

    years = range(params.project_duration + 6)
    curve = np.empty(len(years), dtype=float)
    for year in years:
        if params.brent_strategy == BrentStrategy.MARKET_BULL:
            price = base * (1 + 0.05 * year) if year <= 5 else base * 1.25
        elif params.brent_strategy == BrentStrategy.MARKET_BEAR:
            price = max(BEAR_FLOOR, base * 0.97 ** year)
        elif params.brent_strategy == BrentStrategy.CUSTOM:
            if year <= peak_year:
                price = peak_value if peak_year == 0 else base + (peak_value - base) * (year / peak_year)
            else:
                price = long_term + (peak_value - long_term) * math.exp(-CUSTOM_DECAY * (year - peak_year))
        else:
            price = base
        curve[year] = price
    return curve


def price_for_year(curve: np.ndarray, year: int) -> float:
    """Curve value for ``year``; years past the curve use its last value."""
    return float(curve[min(year, len(curve) - 1)])


def api_price_multiplier(params: ProjectParameters) -> float:
    """Quality adjustment of the realised price (detailed production only)."""
    if params.production_mode != ProductionMode.DETAILED:
        return 1.0
    return 1.0 + (params.oil_api - API_REFERENCE) * API_SENSITIVITY


def realised_price(params: ProjectParameters, brent: float) -> float:
    """Brent net of the quality spread and adjusted for API gravity."""
    return brent * (1.0 - params.brent_spread / 100.0) * api_price_multiplier(params)
