"""
Operating cost per production year.

simple    opex = revenue × margin
detailed  opex = fixed · infl^(n−1) + variable · barrels + workover · infl^(n−1)

workover = wells · λ(t) · (mobilization + days · daily_rate) when λavg > 0,
           otherwise the static workover_cost provision.

Gas re-injection (detailed production, GOR > 200 m³/m³) is added in both modes.
λ(t) comes from the same failure profile that derates production.
"""

from __future__ import annotations

from core.config import ProjectParameters
from core.schema import OpexMode, ProductionMode
from reliability.base import FailureRateProfile
from reliability.profiles import failure_profile

GOR_THRESHOLD = 200.0
GAS_INJECTION_COST = 1_500_000.0  # USD per MM m³ re-injected


class OpexModel:
    def __init__(self, params: ProjectParameters, profile: FailureRateProfile | None = None):
        self.params = params
        self.profile = profile if profile is not None else failure_profile(
            params.workover_failure_profile, params.workover_lambda
        )

    def failure_rate(self, year: int) -> float:
        """λ(t) for project year ``year``; 0 when no failure rate is configured."""
        if self.params.workover_lambda <= 0:
            return 0.0
        return self.profile.rate(year, self.params.project_duration)

    def workover_cost(self, failure_rate: float) -> float:
        """Un-inflated annual workover provision (USD)."""
        p = self.params
        if p.workover_lambda <= 0:
            return p.workover_cost
        cost_per_event_mm = p.workover_mob_cost + p.workover_duration * p.workover_daily_rate / 1000.0
        return p.well_count * failure_rate * cost_per_event_mm * 1_000_000.0

    def gas_injection_cost(self, production_mmbbl: float) -> float:
        p = self.params
        if p.production_mode != ProductionMode.DETAILED or p.gor <= GOR_THRESHOLD:
            return 0.0
        excess_gas = production_mmbbl * (p.gor - GOR_THRESHOLD) / 1000.0  # MM m³
        return excess_gas * GAS_INJECTION_COST

    def cost(
        self,
        production_year: int,
        revenue: float,
        production_mmbbl: float,
        failure_rate: float,
    ) -> float:
        if production_year <= 0:
            return 0.0
        p = self.params
        gas = self.gas_injection_cost(production_mmbbl)

        if p.opex_mode == OpexMode.SIMPLE:
            return revenue * p.opex_margin / 100.0 + gas

        inflation = (1.0 + p.cost_inflation / 100.0) ** (production_year - 1)
        fixed = p.opex_fixed * inflation
        variable = production_mmbbl * 1_000_000.0 * p.opex_variable
        workover = self.workover_cost(failure_rate) * inflation
        return fixed + variable + workover + gas
