"""
Depreciation of capitalised capex, charged from production year 1.

detailed  one schedule per category (platform / wells / subsea):
            linear, accelerated  base / years for years 1..N (same law, shorter N)
            uop                  base × barrels this year / total reserves
simple    the whole capitalised capex, linear over depreciation_years

The final horizon year absorbs the rounding remainder and every charge is
clamped so accumulated depreciation never exceeds its base.
"""

from __future__ import annotations

from typing import Dict, Mapping

from core.config import ProjectParameters
from core.schema import ASSET_CATEGORIES, DepreciationMethod, DepreciationMode

from .capex import CapexSchedule

SIMPLE_POOL = "total"


class DepreciationEngine:
    def __init__(self, params: ProjectParameters, schedule: CapexSchedule):
        self.params = params
        if params.depreciation_mode == DepreciationMode.SIMPLE:
            self.bases = {SIMPLE_POOL: schedule.capitalised_capex}
        else:
            self.bases = {c: schedule.asset_bases[c] for c in ASSET_CATEGORIES}

    def _method(self, pool: str):
        if pool == SIMPLE_POOL:
            return DepreciationMethod.STRAIGHT_LINE, self.params.depreciation_years
        config = self.params.depreciation_config.for_category(pool)
        return config.method, config.years

    def _raw_charge(self, pool: str, production_year: int, production_mmbbl: float, accumulated: float) -> float:
        base = self.bases[pool]
        method, years = self._method(pool)

        if method == DepreciationMethod.UNIT_OF_PRODUCTION:
            reserves = self.params.total_reserves
            return base * production_mmbbl / reserves if reserves > 0 else 0.0

        if production_year > years:
            return 0.0
        if production_year == years:
            return base - accumulated
        return base / years

    def charges(
        self,
        production_year: int,
        production_mmbbl: float,
        accumulated: Mapping[str, float],
    ) -> Dict[str, float]:
        """Charge per pool for one year, given depreciation accumulated so far."""
        out = {}
        for pool, base in self.bases.items():
            if production_year <= 0 or base <= 0:
                out[pool] = 0.0
                continue
            acc = accumulated.get(pool, 0.0)
            charge = self._raw_charge(pool, production_year, production_mmbbl, acc)
            out[pool] = min(max(charge, 0.0), max(base - acc, 0.0))
        return out
