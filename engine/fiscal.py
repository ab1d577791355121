"""
Government take under three fiscal regimes, one function per regime.

concession       royalties + special participation on
                 (revenue − royalties − opex − charter − depreciation) when positive
                 + corporate tax on what remains
sharing          royalties + cost-oil recovery capped at a share of revenue,
                 government share of profit oil, corporate tax on
                 revenue − royalties − government profit oil − opex − charter − depreciation
transfer_rights  royalties + corporate tax

Loss carry-forward is common to all regimes: a negative taxable income adds to
the loss balance; a positive one may use at most 30% of itself against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from core.config import ProjectParameters
from core.schema import TaxRegime

LOSS_USAGE_CAP = 0.30


@dataclass(frozen=True)
class FiscalInputs:
    revenue: float
    opex: float
    charter_cost: float
    depreciation: float
    capex: float


@dataclass(frozen=True)
class FiscalOutcome:
    royalties: float
    special_participation: float
    profit_oil_gov: float
    corporate_tax: float
    taxable_income: float
    loss_carry_forward: float  # balance after this year
    recoverable_cost: float  # unrecovered cost-oil balance after this year

    @property
    def taxes(self) -> float:
        return self.royalties + self.special_participation + self.profit_oil_gov + self.corporate_tax


def apply_loss_carry_forward(taxable_income: float, loss_balance: float) -> Tuple[float, float]:
    """
    Returns (taxable income after loss usage, new loss balance).

    Usage is capped at LOSS_USAGE_CAP of the year's positive taxable income, so a
    balance may outlive the project.
    """
    if taxable_income < 0:
        return 0.0, loss_balance - taxable_income
    usage = min(loss_balance, taxable_income * LOSS_USAGE_CAP)
    return taxable_income - usage, loss_balance - usage


def _corporate_tax(params: ProjectParameters, taxable_income: float, loss_balance: float) -> Tuple[float, float]:
    taxable, balance = apply_loss_carry_forward(taxable_income, loss_balance)
    return taxable * params.corporate_tax_rate / 100.0, balance


def concession(params, inputs, loss_balance, recoverable_cost) -> FiscalOutcome:
    royalties = inputs.revenue * params.royalties_rate / 100.0
    net = inputs.revenue - royalties - inputs.opex - inputs.charter_cost - inputs.depreciation
    special = net * params.special_participation_rate / 100.0 if net > 0 else 0.0
    taxable_income = net - special
    corporate_tax, balance = _corporate_tax(params, taxable_income, loss_balance)
    return FiscalOutcome(
        royalties=royalties,
        special_participation=special,
        profit_oil_gov=0.0,
        corporate_tax=corporate_tax,
        taxable_income=taxable_income,
        loss_carry_forward=balance,
        recoverable_cost=recoverable_cost,
    )


def production_sharing(params, inputs, loss_balance, recoverable_cost) -> FiscalOutcome:
    royalties = inputs.revenue * params.royalties_rate / 100.0

    # capex is both recoverable here and depreciated below
    pool = recoverable_cost + inputs.capex + inputs.opex + inputs.charter_cost
    recovered = min(pool, inputs.revenue * params.cost_oil_cap / 100.0)
    profit_oil = max(0.0, inputs.revenue - royalties - recovered)
    profit_oil_gov = profit_oil * params.profit_oil_gov_share / 100.0

    taxable_income = (
        inputs.revenue - royalties - profit_oil_gov
        - inputs.opex - inputs.charter_cost - inputs.depreciation
    )
    corporate_tax, balance = _corporate_tax(params, taxable_income, loss_balance)
    return FiscalOutcome(
        royalties=royalties,
        special_participation=0.0,
        profit_oil_gov=profit_oil_gov,
        corporate_tax=corporate_tax,
        taxable_income=taxable_income,
        loss_carry_forward=balance,
        recoverable_cost=pool - recovered,
    )


def transfer_of_rights(params, inputs, loss_balance, recoverable_cost) -> FiscalOutcome:
    royalties = inputs.revenue * params.royalties_rate / 100.0
    taxable_income = inputs.revenue - royalties - inputs.opex - inputs.charter_cost - inputs.depreciation
    corporate_tax, balance = _corporate_tax(params, taxable_income, loss_balance)
    return FiscalOutcome(
        royalties=royalties,
        special_participation=0.0,
        profit_oil_gov=0.0,
        corporate_tax=corporate_tax,
        taxable_income=taxable_income,
        loss_carry_forward=balance,
        recoverable_cost=recoverable_cost,
    )


RegimeFn = Callable[[ProjectParameters, FiscalInputs, float, float], FiscalOutcome]

FISCAL_REGIMES: Dict[TaxRegime, RegimeFn] = {
    TaxRegime.CONCESSION: concession,
    TaxRegime.SHARING: production_sharing,
    TaxRegime.TRANSFER_RIGHTS: transfer_of_rights,
}


class FiscalEngine:
    """Dispatches each year to the regime selected by ``params.tax_regime``."""

    def __init__(self, params: ProjectParameters):
        self.params = params
        self.regime = FISCAL_REGIMES[TaxRegime(params.tax_regime)]

    def assess(self, inputs: FiscalInputs, loss_balance: float, recoverable_cost: float) -> FiscalOutcome:
        return self.regime(self.params, inputs, loss_balance, recoverable_cost)
