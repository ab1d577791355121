"""
Oil production profile: ramp-up, plateau, Arps decline, water cut and liquids.

Production year n counts from first oil (n = 1 in project year capex_duration).

  n ≤ ramp-up            q = peak · n / ramp-up
  n ≤ ramp-up + plateau  q = peak
  afterwards             q = peak · exp(−Di·n')            (b = 0)
                         q = peak / (1 + b·Di·n')^(1/b)    (b > 0)
  with n' = years past plateau and Di the annual decline fraction.

Detailed mode adds, in order: the workover downtime derate
(1 − λ(t)·wait_days/365), the logistic water cut, and the liquids-handling
ceiling oil ≤ liquids_capacity · (1 − water cut). Liquids and water are
back-calculated from the constrained oil rate.

Once decline has begun the rate never rises again, whatever the derate does.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from core.config import ProjectParameters
from core.schema import ProductionMode
from core.utils import logistic_water_cut

KBPD_TO_MMBBL = 0.365  # kbpd sustained over a year → MMbbl


def arps_rate(peak: float, decline_pct: float, b: float, years_post_plateau: float) -> float:
    """Arps decline rate; b = 0 is the exponential limit."""
    di = decline_pct / 100.0
    if b == 0:
        return peak * math.exp(-di * years_post_plateau)
    return peak / (1.0 + b * di * years_post_plateau) ** (1.0 / b)


def peak_from_reserves(
    total_reserves: float,
    ramp_up: float,
    plateau: float,
    decline_pct: float,
    duration: int,
) -> float:
    """
    Peak rate (kbpd) whose ramp/plateau/exponential-decline profile integrates to
    ``total_reserves`` MMbbl over ``duration`` production years.
    """
    integrated = 0.0
    for t in range(1, int(duration) + 1):
        if t <= ramp_up:
            factor = t / ramp_up if ramp_up > 0 else 1.0
        elif t <= ramp_up + plateau:
            factor = 1.0
        else:
            factor = (1.0 - decline_pct / 100.0) ** (t - (ramp_up + plateau))
        integrated += factor * KBPD_TO_MMBBL
    if integrated == 0:
        return 0.0
    return total_reserves / integrated


@dataclass(frozen=True)
class ProductionPoint:
    """One year of production. Rates in kbpd, water cut as a fraction."""
    oil_rate: float = 0.0
    liquid_rate: float = 0.0
    water_rate: float = 0.0
    water_cut: float = 0.0
    efficiency: float = 1.0

    @property
    def oil_mmbbl(self) -> float:
        return self.oil_rate * KBPD_TO_MMBBL


class ProductionModel:
    """Per-year production for one parameter set."""

    def __init__(self, params: ProjectParameters):
        self.params = params
        self.detailed = params.production_mode == ProductionMode.DETAILED

    def in_decline(self, production_year: int) -> bool:
        p = self.params
        return production_year > p.ramp_up_duration + p.plateau_duration

    def potential(self, production_year: int) -> float:
        """Unconstrained reservoir rate (kbpd)."""
        p = self.params
        if production_year <= 0:
            return 0.0
        if production_year <= p.ramp_up_duration:
            return p.peak_production * production_year / p.ramp_up_duration
        if production_year <= p.ramp_up_duration + p.plateau_duration:
            return p.peak_production
        years_post_plateau = production_year - (p.ramp_up_duration + p.plateau_duration)
        return arps_rate(p.peak_production, p.decline_rate, p.hyperbolic_factor, years_post_plateau)

    def water_cut(self, production_year: int) -> float:
        if not self.detailed or production_year <= 0:
            return 0.0
        p = self.params
        return logistic_water_cut(production_year, p.bsw_max, p.bsw_breakthrough, p.bsw_growth_rate)

    def efficiency(self, failure_rate: float) -> float:
        """Share of the year wells are producing, given λ(t) failures per well-year."""
        p = self.params
        if not self.detailed or p.workover_lambda <= 0 or p.workover_tesp <= 0:
            return 1.0
        return max(0.0, 1.0 - failure_rate * p.workover_tesp / 365.0)

    def produce(
        self,
        production_year: int,
        failure_rate: float = 0.0,
        previous_rate: Optional[float] = None,
    ) -> ProductionPoint:
        if production_year <= 0:
            return ProductionPoint()

        efficiency = self.efficiency(failure_rate)
        oil = self.potential(production_year) * efficiency

        if not self.detailed:
            if previous_rate is not None and self.in_decline(production_year):
                oil = min(oil, previous_rate)
            return ProductionPoint(oil_rate=oil, liquid_rate=oil, efficiency=efficiency)

        bsw = self.water_cut(production_year)
        capacity = self.params.max_liquids / 1000.0
        max_oil = capacity * (1.0 - bsw)
        oil = min(oil, max_oil)
        if previous_rate is not None and self.in_decline(production_year):
            oil = min(oil, previous_rate)

        if oil >= max_oil:
            liquids = capacity
        else:
            liquids = oil / (1.0 - bsw)

        return ProductionPoint(
            oil_rate=oil,
            liquid_rate=liquids,
            water_rate=liquids - oil,
            water_cut=bsw,
            efficiency=efficiency,
        )
