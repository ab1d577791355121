"""
Cash-flow assembly: one YearRecord per project year 0 .. project_duration + 1.

Each year is a fold step: (year, AccumulatorState) → YearRecord, with the state
updated in place. The state is created fresh by every assemble() call, so two
runs never share accumulated depreciation, cost-oil or tax losses.

Year layout:
  0 .. capex_duration − 1           build years (capex only, no fiscal assessment)
  capex_duration .. duration        production years 1 .. N (first two also carry
                                    completion capex)
  duration + 1                      decommissioning only

Money fields are positive magnitudes; free cash flow is
revenue − opex − charter − taxes − capex.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

from core.config import ProjectParameters
from core.schema import YEAR_RECORD_COLUMNS, YEAR_RECORD_WIRE_NAMES
from core.utils import discount_factor, finite_or

from .capex import CapexSchedule, CapexScheduler
from .depreciation import DepreciationEngine
from .fiscal import FiscalEngine, FiscalInputs
from .opex import OpexModel
from .pricing import brent_curve, price_for_year, realised_price
from .production import ProductionModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearRecord:
    year: int
    production_year: int
    is_decommissioning_year: bool
    capex: float = 0.0
    capex_tax: float = 0.0
    revenue: float = 0.0
    opex: float = 0.0
    charter_cost: float = 0.0
    royalties: float = 0.0
    special_participation: float = 0.0
    profit_oil_gov: float = 0.0
    corporate_tax: float = 0.0
    taxes: float = 0.0
    depreciation: float = 0.0
    depreciation_tax_shield: float = 0.0
    free_cash_flow: float = 0.0
    discounted_cash_flow: float = 0.0
    cumulative_cash_flow: float = 0.0
    cumulative_discounted_cash_flow: float = 0.0
    brent_price: float = 0.0
    oil_price: float = 0.0
    production_volume: float = 0.0  # kbpd
    production_mmbbl: float = 0.0
    liquid_volume: float = 0.0  # kbpd
    water_volume: float = 0.0  # kbpd
    water_cut: float = 0.0  # fraction
    failure_rate: float = 0.0
    production_efficiency: float = 1.0
    loss_carry_forward: float = 0.0
    recoverable_cost_balance: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    def to_wire(self) -> dict:
        """camelCase dict for the presentation layer."""
        return {YEAR_RECORD_WIRE_NAMES[k]: v for k, v in asdict(self).items()}


@dataclass
class AccumulatorState:
    """Mutable fold state for a single engine run."""
    depreciation: Dict[str, float] = field(default_factory=dict)
    recoverable_cost: float = 0.0
    loss_carry_forward: float = 0.0
    cumulative_cash_flow: float = 0.0
    cumulative_discounted_cash_flow: float = 0.0
    last_oil_rate: Optional[float] = None
    sanitized: List[str] = field(default_factory=list)

    @classmethod
    def fresh(cls, depreciation_pools) -> "AccumulatorState":
        return cls(depreciation={pool: 0.0 for pool in depreciation_pools})


_INT_FIELDS = ("year", "production_year", "is_decommissioning_year")


def sanitize_record(values: Dict[str, float], year: int) -> Tuple[Dict[str, float], List[str]]:
    """
    Replace non-finite money/volume values by 0.

    Returns the cleaned values and the names that were replaced. Any replacement
    is logged; for in-range inputs the list must be empty.
    """
    clean = dict(values)
    replaced = []
    for name, value in values.items():
        if name in _INT_FIELDS:
            continue
        if value is None or not math.isfinite(value):
            clean[name] = finite_or(value, 0.0)
            replaced.append(name)
            logger.warning("Non-finite %s in year %d replaced by 0", name, year)
    return clean, replaced


class CashFlowAssembler:
    """
    Folds capex, production, opex, depreciation and fiscal terms into YearRecords.

    Usage:
        records, state = CashFlowAssembler(params).assemble()
    """

    def __init__(self, params: ProjectParameters):
        self.params = params
        self.schedule: CapexSchedule = CapexScheduler(params).schedule()
        self.production = ProductionModel(params)
        self.opex = OpexModel(params)
        self.depreciation = DepreciationEngine(params, self.schedule)
        self.fiscal = FiscalEngine(params)
        self.brent = brent_curve(params)

    @property
    def years(self) -> range:
        return range(self.params.project_duration + 2)

    def assemble(self) -> Tuple[List[YearRecord], AccumulatorState]:
        state = AccumulatorState.fresh(self.depreciation.bases)
        records = [self.fold_year(year, state) for year in self.years]
        return records, state

    def fold_year(self, year: int, state: AccumulatorState) -> YearRecord:
        p = self.params
        is_decom = year == p.decommissioning_year
        production_year = year - p.production_start_year + 1

        capex = float(self.schedule.capex[year])
        capex_tax = float(self.schedule.capex_tax[year])
        brent = price_for_year(self.brent, year)
        oil_price = realised_price(p, brent)

        values = {
            "year": year,
            "production_year": max(production_year, 0) if not is_decom else 0,
            "is_decommissioning_year": is_decom,
            "capex": capex,
            "capex_tax": capex_tax,
            "brent_price": brent,
            "oil_price": oil_price,
        }

        # Operating and fiscal terms start at first oil; build years carry capex only.
        if production_year > 0 and not is_decom:
            values.update(self._operate(year, production_year, capex, oil_price, state))

        values["free_cash_flow"] = (
            values.get("revenue", 0.0)
            - values.get("opex", 0.0)
            - values.get("charter_cost", 0.0)
            - values.get("taxes", 0.0)
            - capex
        )
        values["loss_carry_forward"] = state.loss_carry_forward
        values["recoverable_cost_balance"] = state.recoverable_cost

        values, replaced = sanitize_record(values, year)
        state.sanitized.extend(f"{name}@{year}" for name in replaced)

        fcf = values["free_cash_flow"]
        dcf = fcf * discount_factor(p.discount_rate, year)
        state.cumulative_cash_flow += fcf
        state.cumulative_discounted_cash_flow += dcf
        values["discounted_cash_flow"] = dcf
        values["cumulative_cash_flow"] = state.cumulative_cash_flow
        values["cumulative_discounted_cash_flow"] = state.cumulative_discounted_cash_flow

        return YearRecord(**{k: values[k] for k in YEAR_RECORD_COLUMNS if k in values})

    def _operate(
        self,
        year: int,
        production_year: int,
        capex: float,
        oil_price: float,
        state: AccumulatorState,
    ) -> Dict[str, float]:
        p = self.params
        out: Dict[str, float] = {}

        failure_rate = self.opex.failure_rate(year)
        point = self.production.produce(production_year, failure_rate, state.last_oil_rate)
        state.last_oil_rate = point.oil_rate

        mmbbl = point.oil_mmbbl
        revenue = mmbbl * 1_000_000.0 * oil_price
        opex = self.opex.cost(production_year, revenue, mmbbl, failure_rate)
        charter = float(self.schedule.charter_cost[year])

        charges = self.depreciation.charges(production_year, mmbbl, state.depreciation)
        for pool, charge in charges.items():
            state.depreciation[pool] += charge
        depreciation = sum(charges.values())

        outcome = self.fiscal.assess(
            FiscalInputs(revenue=revenue, opex=opex, charter_cost=charter,
                         depreciation=depreciation, capex=capex),
            state.loss_carry_forward,
            state.recoverable_cost,
        )
        state.loss_carry_forward = outcome.loss_carry_forward
        state.recoverable_cost = outcome.recoverable_cost

        out.update(
            revenue=revenue,
            opex=opex,
            charter_cost=charter,
            royalties=outcome.royalties,
            special_participation=outcome.special_participation,
            profit_oil_gov=outcome.profit_oil_gov,
            corporate_tax=outcome.corporate_tax,
            taxes=outcome.taxes,
            depreciation=depreciation,
            depreciation_tax_shield=depreciation * p.corporate_tax_rate / 100.0,
            production_volume=point.oil_rate,
            production_mmbbl=mmbbl,
            liquid_volume=point.liquid_rate,
            water_volume=point.water_rate,
            water_cut=point.water_cut,
            failure_rate=failure_rate,
            production_efficiency=point.efficiency,
        )
        return out
